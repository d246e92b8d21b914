"""Text-versus-binary policy for downloaded and exported file content.

Tool results travel to the agent as text, so only text-like payloads are
forwarded whole. Anything else is replaced by a short placeholder naming
its MIME type and size.
"""

TEXT_MIME_MARKERS = ("json", "xml", "csv", "javascript", "html")


def is_text_mime_type(mime_type: str) -> bool:
    """Check whether a MIME type belongs to a text-like family.

    Matching is by substring, so Office Open XML types
    (``application/vnd.openxmlformats-...``) count as text.

    Args:
        mime_type: Content-Type value, parameters included.

    Returns:
        True for text/* and types containing json, xml, csv, javascript or html.
    """
    lowered = mime_type.lower()
    if lowered.startswith("text/"):
        return True
    return any(marker in lowered for marker in TEXT_MIME_MARKERS)


def binary_file_placeholder(mime_type: str, size: int) -> str:
    """Placeholder for binary content fetched via alt=media."""
    return (
        f"[Binary file: {mime_type}, {size} bytes. "
        "Use gd_export_file for Google Workspace files or download via webContentLink.]"
    )


def binary_export_placeholder(mime_type: str, size: int) -> str:
    """Placeholder for binary export formats such as PDF or DOCX."""
    return (
        f"[Binary export: {mime_type}, {size} bytes. "
        "For binary formats like PDF/DOCX, use the webViewLink to download.]"
    )
