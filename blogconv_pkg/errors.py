"""Exceptions raised while converting a document."""


class ConverterError(Exception):
    """Base class for every fatal conversion error."""


class MissingDependencyError(ConverterError):
    """The rendering engine is not installed or not known."""


class UsageError(ConverterError):
    """The tool was invoked without an input file."""


class InputNotFoundError(ConverterError):
    pass


class TemplateNotFoundError(ConverterError):
    pass


class UnsupportedFormatError(ConverterError):
    """The input extension cannot be mapped to a markup format."""


class ConversionFailureError(ConverterError):
    """The renderer failed or produced no output."""


class RenderError(Exception):
    """Raised by a renderer when it cannot produce HTML for the given content."""
