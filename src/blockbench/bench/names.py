"""Test name normalization.

Two separate reductions exist and they run at different points of the
pipeline:

- :func:`strip_run_marker` runs as soon as a test has been invoked and
  removes the instrumentation suffix (``parse_1`` -> ``parse``), so that
  records from every pass share one key.
- :func:`display_name` runs only when the report is rendered and drops
  the module path (``lexer::tests::parse`` -> ``parse``).

Keeping the full path until report time means two tests with the same
leaf name in different modules are still aggregated separately.
"""

from __future__ import annotations

DEFAULT_QUALIFIER_SEPARATOR = "::"
MARKER_DELIMITER = "_"


def strip_run_marker(name: str, marker: str) -> str:
    """Remove the trailing ``_<marker>`` suffix(es) from *name*.

    Repeated suffixes are all removed, so applying the function to its
    own result never changes it.  A name that would become empty is
    returned unchanged.
    """
    if not marker:
        return name
    suffix = f"{MARKER_DELIMITER}{marker}"
    stripped = name
    while stripped.endswith(suffix) and len(stripped) > len(suffix):
        stripped = stripped[: -len(suffix)]
    return stripped


def display_name(name: str, separator: str = DEFAULT_QUALIFIER_SEPARATOR) -> str:
    """Return the last *separator*-delimited segment of *name*.

    Names without the separator are returned as they are.
    """
    if not separator or separator not in name:
        return name
    last = name.rsplit(separator, 1)[-1]
    # "foo::" has no meaningful leaf; keep the whole name.
    return last or name
