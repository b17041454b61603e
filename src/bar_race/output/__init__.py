"""Output providers for different animation formats."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .base import OutputProvider
from .gif_provider import GifOutputProvider
from .svg_provider import SvgOutputProvider
from .webp_provider import WebPOutputProvider


@dataclass(frozen=True)
class OutputFormatSpec:
    extension: str
    provider_class: type[OutputProvider[Any]]
    vector: bool = False


_OUTPUT_FORMATS: dict[str, OutputFormatSpec] = {
    "gif": OutputFormatSpec(
        extension=".gif",
        provider_class=GifOutputProvider,
    ),
    "webp": OutputFormatSpec(
        extension=".webp",
        provider_class=WebPOutputProvider,
    ),
    "svg": OutputFormatSpec(
        extension=".svg",
        provider_class=SvgOutputProvider,
        vector=True,
    ),
}


def resolve_output_spec(file_path: str) -> OutputFormatSpec:
    """
    Resolve the output format from a file extension (case-insensitive).

    Raises:
        ValueError: If file extension is not supported
    """
    ext = Path(file_path).suffix.lower()
    spec = _OUTPUT_FORMATS.get(ext.removeprefix("."))
    if spec is not None:
        return spec
    supported = ", ".join(spec.extension for spec in _OUTPUT_FORMATS.values())
    raise ValueError(f"Unsupported output format: {ext or '(none)'}. Supported formats: {supported}")


def resolve_output_provider(file_path: str) -> OutputProvider[Any]:
    """
    Resolve the appropriate output provider based on file extension.

    Args:
        file_path: Output file path (extension determines format)

    Returns:
        An OutputProvider instance

    Raises:
        ValueError: If file extension is not supported
    """
    return resolve_output_spec(file_path).provider_class(file_path)


def supported_output_formats() -> tuple[str, ...]:
    """Return supported output format names."""
    return tuple(_OUTPUT_FORMATS.keys())


__all__ = [
    "OutputFormatSpec",
    "OutputProvider",
    "GifOutputProvider",
    "WebPOutputProvider",
    "SvgOutputProvider",
    "resolve_output_provider",
    "resolve_output_spec",
    "supported_output_formats",
]
