"""Configuration resolution.

Turns the flat key/value pairs entered by the user into the complete,
immutable ``TokenSet`` used for one generation request: user values first,
then defaults for absent keys, freshly generated identifiers, the namespace
expansion, the CMake ``target`` name and ``ON``/``OFF`` feature flags.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from datetime import datetime

from jamba_quickstart.errors import ValidationError

from .identifiers import IdentifierGenerator

# Feature flags rendered as CMake ``ON``/``OFF`` options.
BOOLEAN_TOKENS: tuple[str, ...] = ("enable_vst2", "enable_audio_unit", "download_vst_sdk")

# Values that switch a feature flag off (compared case-insensitively).
FALSE_VALUES = frozenset({"false", "no", "off"})

JAMBA_ROOT_DIR = "${CMAKE_CURRENT_LIST_DIR}/../../pongasoft/jamba"


def convert_to_boolean(value: str | None) -> bool:
    """Interpret a form value as a boolean.

    Absence is ``False``; otherwise anything except ``false``/``no``/``off``
    (any case) is ``True``, including the empty string.
    """
    if value is None:
        return False
    return value.lower() not in FALSE_VALUES


def expand_namespace(namespace: str | None) -> tuple[str, str]:
    """Return the ``(namespace_start, namespace_end)`` C++ lines for *namespace*.

    Examples::

        expand_namespace("Acme::Synths")
            -> ("namespace Acme {\\nnamespace Synths {", "}\\n}")
        expand_namespace("") -> ("", "")
    """
    ns = (namespace or "").strip()
    if not ns:
        return "", ""
    segments = ns.split("::")
    start = "\n".join(f"namespace {segment} {{" for segment in segments)
    end = "\n".join("}" for _ in segments)
    return start, end


def derive_target(name: str, company: str | None) -> str:
    """CMake target name: ``{company}_{name}``, or just ``name`` without a company."""
    if not company:
        return name
    return f"{company}_{name}"


class TokenSet(Mapping[str, str]):
    """Read-only ``token key -> value`` mapping for one generation request."""

    def __init__(self, tokens: Mapping[str, str]) -> None:
        self._tokens = dict(tokens)

    def __getitem__(self, key: str) -> str:
        return self._tokens[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"TokenSet({self._tokens!r})"

    @property
    def plugin_name(self) -> str:
        return self._tokens["name"]


class ConfigurationResolver:
    """Builds a fresh ``TokenSet`` from user input.

    Args:
        jamba_git_hash: Version (git hash or tag) of the template being resolved.
        jamba_download_url_hash: Optional hash of the Jamba download URL,
            exposed to CMake files of templates that download Jamba.
        identifiers: Source of processor/controller unique IDs.
        clock: Returns the current time; only the year is used.
    """

    def __init__(
        self,
        jamba_git_hash: str,
        jamba_download_url_hash: str | None = None,
        identifiers: IdentifierGenerator | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.jamba_git_hash = jamba_git_hash
        self.jamba_download_url_hash = jamba_download_url_hash
        self.identifiers = identifiers or IdentifierGenerator()
        self.clock = clock

    def resolve(self, user_input: Mapping[str, str]) -> TokenSet:
        """Resolve *user_input* into the complete token set.

        Raises:
            ValidationError: If ``name`` is missing or empty.
        """
        tokens: dict[str, str] = dict(user_input)

        name = tokens.get("name")
        if not name:
            raise ValidationError("name", "Plugin name must be provided")

        tokens.setdefault("Plugin", name)
        tokens.setdefault("jamba_git_hash", self.jamba_git_hash)
        tokens.setdefault("jamba_download_url_hash", self.jamba_download_url_hash or "")

        processor_id = self.identifiers.generate()
        tokens.setdefault("processor_uuid", processor_id.as_c_string())
        tokens.setdefault("snapshot_uuid", processor_id.as_snapshot_id())
        tokens.setdefault("controller_uuid", self.identifiers.generate().as_c_string())
        tokens.setdefault("debug_processor_uuid", self.identifiers.generate().as_c_string())
        tokens.setdefault("debug_controller_uuid", self.identifiers.generate().as_c_string())

        tokens["namespace_start"], tokens["namespace_end"] = expand_namespace(
            user_input.get("namespace")
        )

        tokens.setdefault("target", derive_target(name, tokens.get("company")))

        for key in BOOLEAN_TOKENS:
            tokens[key] = "ON" if convert_to_boolean(tokens.get(key)) else "OFF"

        tokens.setdefault("year", str(self.clock().year))
        tokens.setdefault("jamba_root_dir", JAMBA_ROOT_DIR)
        tokens.setdefault("local_jamba", "#")
        tokens.setdefault("remote_jamba", "")

        return TokenSet(tokens)
