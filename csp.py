"""Content-Security-Policy configuration and response decoration."""
from dataclasses import dataclass, field

CSP_HEADER = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER = "Content-Security-Policy-Report-Only"


class PolicyConfigurationError(ValueError):
    """Raised when a policy cannot be built from the given directives."""


def parse_toggle(value) -> bool:
    """Interpret an environment toggle. Only the exact string "false" turns it off."""
    return value != "false"


_FORBIDDEN = (";", ",")


def _check_token(kind: str, value) -> str:
    if not isinstance(value, str):
        raise PolicyConfigurationError(f"{kind} must be a string, got {type(value).__name__}.")
    if not value or any(ch.isspace() or ch in _FORBIDDEN for ch in value):
        raise PolicyConfigurationError(f"{kind} {value!r} must be a single non-empty token.")
    return value


def _normalize_sources(name: str, sources) -> tuple:
    if isinstance(sources, str):
        sources = sources.split()
    elif isinstance(sources, (set, frozenset)):
        # Sets are unordered; sort for a stable header value
        sources = sorted(sources, key=str)
    elif sources is None or not hasattr(sources, "__iter__"):
        raise PolicyConfigurationError(f"Directive '{name}' sources must be a string or a sequence.")
    unique = []
    for source in sources:
        source = _check_token(f"Source in directive '{name}'", source)
        if source not in unique:
            unique.append(source)
    if not unique:
        raise PolicyConfigurationError(f"Directive '{name}' has an empty source list.")
    return tuple(unique)


def render_directives(directives) -> str:
    """Join (name, sources) pairs into a single header value, keeping their order."""
    return "; ".join(
        " ".join((name,) + tuple(sources)) for name, sources in directives
    )


@dataclass(frozen=True)
class PolicyConfiguration:
    """Process-wide CSP settings, validated once and read-only afterwards."""

    enabled: bool = True
    report_only: bool = True
    directives: tuple = ()
    header_value: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        directives = self.directives
        if isinstance(directives, dict):
            directives = directives.items()

        table = []
        names = set()
        for name, sources in directives:
            if not isinstance(name, str):
                raise PolicyConfigurationError(f"Directive names must be strings, got {type(name).__name__}.")
            name = name.strip()
            if not name:
                raise PolicyConfigurationError("Directive names must not be empty.")
            _check_token("Directive name", name)
            if name in names:
                raise PolicyConfigurationError(f"Directive '{name}' is declared more than once.")
            names.add(name)
            table.append((name, _normalize_sources(name, sources)))

        if self.enabled and not table:
            raise PolicyConfigurationError("An enabled policy needs at least one directive.")

        # Frozen: normalized values go in through object.__setattr__
        object.__setattr__(self, "enabled", bool(self.enabled))
        object.__setattr__(self, "report_only", bool(self.report_only))
        object.__setattr__(self, "directives", tuple(table))
        object.__setattr__(self, "header_value", render_directives(table))

    @property
    def header_name(self) -> str:
        return CSP_REPORT_ONLY_HEADER if self.report_only else CSP_HEADER

    @property
    def mode(self) -> str:
        """Short label for logs: 'disabled', 'report-only' or 'enforcing'."""
        if not self.enabled:
            return "disabled"
        return "report-only" if self.report_only else "enforcing"

    @classmethod
    def from_environ(cls, environ, directives, enable_var="ENABLE_APP_CSP", report_only_var="REPORT_ONLY"):
        """Build a configuration from environment-style strings."""
        return cls(
            enabled=parse_toggle(environ.get(enable_var)),
            report_only=parse_toggle(environ.get(report_only_var)),
            directives=directives,
        )


def apply_policy(policy: PolicyConfiguration, response):
    """Attach the policy header to the response, or leave it untouched when disabled."""
    if not policy.enabled:
        return response

    # Item assignment replaces any earlier value for the same name
    response.headers[policy.header_name] = policy.header_value
    return response
