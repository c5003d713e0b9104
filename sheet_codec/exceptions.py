"""
Custom exception hierarchy for sheet-codec.

Why a custom hierarchy:
- Callers can catch specific exceptions (e.g., UnsupportedFormatError vs
  MalformedXmlError) without relying on generic ValueError/RuntimeError.
- The boundary layer (an HTTP handler, typically) can map every failure to
  a client or server error through ``client_error`` and show
  ``public_message`` without leaking parser internals to untrusted users.
"""


class SheetCodecError(Exception):
    """Base exception for all sheet-codec errors.

    Attributes:
        client_error: ``True`` when the failure is caused by the input
            (maps to a 4xx response), ``False`` for server-side failures.
        public_message: Short message that is safe to show to end users.
            ``str(exc)`` carries the full detail for logs.
    """

    client_error: bool = True
    public_message: str = "The file could not be processed."


class UnsupportedFormatError(SheetCodecError):
    """Raised when the declared format or file extension is not csv/xlsx/ods."""

    public_message = "Unsupported file format. Supported formats: csv, xlsx, ods."


class MalformedContainerError(SheetCodecError):
    """Raised when a file cannot be read as its container format at all.

    For xlsx/ods: the buffer is not a readable zip archive. For delimited
    text: the tokenizer fails outright (single bad records are dropped, not
    raised).
    """

    public_message = "The file could not be read in its declared format."


class InvalidEncodingError(SheetCodecError):
    """Raised when text that must be UTF-8 cannot be decoded.

    Applies to delimited text input and to the XML parts inside an archive.
    """

    public_message = "The file is not UTF-8 encoded."


class MissingPartError(SheetCodecError):
    """Raised when a required archive member is absent.

    For example ``content.xml`` in an ods file, or the first worksheet of an
    xlsx file. A missing shared-strings part is *not* an error.
    """

    public_message = "The spreadsheet is missing required content."


class MalformedXmlError(SheetCodecError):
    """Raised when an XML part fails to parse.

    The underlying parser message is kept in ``detail`` (and in ``str(exc)``)
    for logging; ``public_message`` stays generic.
    """

    public_message = "The spreadsheet content is malformed."

    def __init__(self, detail: str) -> None:
        super().__init__(f"Malformed XML: {detail}")
        self.detail = detail


class ConfigValidationError(SheetCodecError):
    """Raised when a codec config file is empty or unusable."""

    client_error = False
    public_message = "The converter is misconfigured."


class EncodeError(SheetCodecError):
    """Raised when writing an xlsx/ods buffer fails.

    Always a server-side failure. ``target_format`` names the format that
    was being written.
    """

    client_error = False
    public_message = "The file could not be generated."

    def __init__(self, target_format: str, detail: str) -> None:
        super().__init__(f"Failed to build {target_format}: {detail}")
        self.target_format = target_format
