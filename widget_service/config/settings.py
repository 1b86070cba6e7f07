"""
Configuration settings for the widget service.

**Conceptual**: This module declares every setting the service recognizes as a
row in a static table (SETTINGS): the environment variable it is read from,
the type it is parsed into, and the default used when the variable is absent.
A single resolver walks that table once at startup and produces an immutable
AppConfig. The rest of the application only ever sees AppConfig.

**Resolution rules**:
  - Variable present and non-empty -> parsed as the declared type.
  - Variable unset or empty -> the documented default.
  - Variable present but unparseable -> ConfigParseError, and nothing is
    returned. Resolution is all-or-nothing.

**Why a table instead of one os.getenv() per field?**
  - The schema is data: tests and tooling can iterate it (list keys, check
    defaults) without duplicating knowledge.
  - One resolver means one place for the "empty counts as absent" rule and
    one place for error messages.
  - Schema invariants (unique keys, parseable defaults) are checked once at
    import, so a typo in the table fails immediately.

**Testing note**: Library code receives an AppConfig argument rather than
reaching for get_config(). Tests build AppConfig(...) directly, or call
resolve_settings() with a plain dict, and never touch the real environment.
"""

import os
import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

STRING = "string"
INTEGER = "integer"

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class ConfigParseError(ValueError):
    """
    Raised when an environment variable cannot be coerced to its declared type.

    **Conceptual**: Environment variables do not change during a process
    lifetime, so there is nothing to retry. This error is meant to abort
    startup with enough context for an operator to fix the environment.

    Attributes:
        key: The environment variable name (e.g. "KTOR_DEMO_DB_PORT").
        raw_value: The string that was supplied.
        expected_type: The declared type name ("integer" or "string").
    """

    def __init__(self, key: str, raw_value: str, expected_type: str):
        self.key = key
        self.raw_value = raw_value
        self.expected_type = expected_type
        super().__init__(
            f"{key} must be {_article(expected_type)} {expected_type}, got: {raw_value!r}"
        )


def _article(type_name: str) -> str:
    return "an" if type_name[:1] in "aeiou" else "a"


@dataclass(frozen=True)
class Setting:
    """
    One configurable value: where it comes from, what it parses to, and its default.

    Attributes:
        accessor: Attribute name on AppConfig (e.g. "db_port").
        key: Environment variable consulted for an override.
        type: STRING or INTEGER.
        default: Default literal, written as it would appear in the
                 environment. Parsed with the same rules as an override.
    """
    accessor: str
    key: str
    type: str
    default: str

    def parse(self, raw: str) -> Any:
        """
        Coerce a raw string to this setting's type.

        Integers accept an optional sign followed by ASCII digits and nothing
        else (no surrounding whitespace, no underscores).

        Raises:
            ConfigParseError: If raw is not a valid value of this type.
        """
        if self.type == STRING:
            return raw
        if self.type == INTEGER:
            if not _INTEGER_PATTERN.fullmatch(raw):
                raise ConfigParseError(self.key, raw, self.type)
            try:
                return int(raw)
            except ValueError as e:
                # digit strings past the interpreter's int conversion limit
                raise ConfigParseError(self.key, raw, self.type) from e
        raise ConfigParseError(self.key, raw, self.type)


SETTINGS: Tuple[Setting, ...] = (
    Setting("db_ip", "KTOR_DEMO_DB_IP", STRING, "127.0.0.1"),
    Setting("db_port", "KTOR_DEMO_DB_PORT", INTEGER, "25432"),
    Setting("db_user", "KTOR_DEMO_DB_USER", STRING, "local-dev"),
    Setting("db_password", "KTOR_DEMO_DB_PASSWORD", STRING, "local-dev"),
    Setting("http_port", "KTOR_DEMO_HTTP_PORT", INTEGER, "9080"),
)


def validate_schema(settings: Sequence[Setting]) -> None:
    """
    Check the invariants every schema table must satisfy.

    - Keys are unique.
    - Accessor names are unique.
    - Types are known.
    - Every default parses as its declared type.

    Raises:
        ValueError: Describing the first violation found.
    """
    seen_keys = set()
    seen_accessors = set()
    for setting in settings:
        if setting.key in seen_keys:
            raise ValueError(f"Duplicate setting key: {setting.key}")
        if setting.accessor in seen_accessors:
            raise ValueError(f"Duplicate setting accessor: {setting.accessor}")
        if setting.type not in (STRING, INTEGER):
            raise ValueError(f"Unknown type {setting.type!r} for setting {setting.key}")
        try:
            setting.parse(setting.default)
        except ConfigParseError as e:
            raise ValueError(f"Default for {setting.key} is invalid: {e}") from e
        seen_keys.add(setting.key)
        seen_accessors.add(setting.accessor)


validate_schema(SETTINGS)


@dataclass(frozen=True)
class AppConfig:
    """
    Resolved, immutable configuration for one process run.

    **Conceptual**: Each attribute corresponds to one row of SETTINGS. The
    instance is built once at startup and passed explicitly to the database
    layer and the HTTP server. Being frozen, reads are always stable.

    **Usage pattern**:
      ```python
      from widget_service.config.settings import AppConfig

      config = AppConfig.from_env()
      engine = build_engine(config)
      uvicorn.run(app, port=config.http_port)
      ```

    Attributes:
        db_ip: Database host (KTOR_DEMO_DB_IP, default "127.0.0.1").
        db_port: Database port (KTOR_DEMO_DB_PORT, default 25432).
        db_user: Database user (KTOR_DEMO_DB_USER, default "local-dev").
        db_password: Database password (KTOR_DEMO_DB_PASSWORD, default "local-dev").
        http_port: HTTP listen port (KTOR_DEMO_HTTP_PORT, default 9080).
    """
    db_ip: str = "127.0.0.1"
    db_port: int = 25432
    db_user: str = "local-dev"
    db_password: str = "local-dev"
    http_port: int = 9080

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Resolve every setting against the environment.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            A fully populated AppConfig.

        Raises:
            ConfigParseError: If any variable is set to an unparseable value.
        """
        return resolve_settings(environ)

    def as_dict(self) -> Dict[str, Any]:
        """Plain accessor -> value mapping, in schema order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def redacted(self) -> Dict[str, Any]:
        """Like as_dict(), with the password masked so it can be logged."""
        values = self.as_dict()
        values["db_password"] = "****"
        return values


def resolve_settings(
    environ: Optional[Mapping[str, str]] = None,
    settings: Sequence[Setting] = SETTINGS,
) -> AppConfig:
    """
    Resolve a schema table against an environment into an AppConfig.

    **Algorithm**:
      1. For each setting, look up its key in environ.
      2. Present and non-empty -> parse it; a parse failure aborts with
         ConfigParseError identifying the key, raw value, and expected type.
      3. Absent or empty -> parse the default.
      4. Build one AppConfig from all resolved values.

    Args:
        environ: Mapping to read from. Defaults to os.environ.
        settings: Schema table. Defaults to SETTINGS.

    Returns:
        Resolved AppConfig.

    Raises:
        ConfigParseError: On the first unparseable override.
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}
    for setting in settings:
        raw = environ.get(setting.key)
        if raw is None or raw == "":
            raw = setting.default
        values[setting.accessor] = setting.parse(raw)

    return AppConfig(**values)


_default_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the process-wide AppConfig, resolving it from os.environ on first use.

    Entry points call this once; everything downstream receives the returned
    object as an argument.
    """
    global _default_config

    if _default_config is None:
        _default_config = resolve_settings()

    return _default_config


def reset_config() -> None:
    """Forget the cached AppConfig so the next get_config() re-resolves (for tests)."""
    global _default_config
    _default_config = None
