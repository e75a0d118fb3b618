from dupescan.core.models import ScanMode

SCAN_MODE_ALIASES = {
    "exact": ScanMode.EXACT,
    "content": ScanMode.CONTENT,
    "size-only": ScanMode.SIZE_ONLY,
    "sizeOnly": ScanMode.SIZE_ONLY,
    "size": ScanMode.SIZE_ONLY,
    "filename": ScanMode.FILENAME,
    "name": ScanMode.FILENAME,
    "date": ScanMode.DATE,
}

SCAN_MODE_CHOICES = list(SCAN_MODE_ALIASES.keys())

SCAN_MODE_HELP_TEXT = (
    "Scan mode (what counts as a duplicate):\n"
    "  exact      : Size → Full content hash (default)\n"
    "  content    : Like exact, then text files are compared character by character\n"
    "  size-only  : Same size in bytes, no hashing (fast, may report false duplicates)\n"
    "  filename   : Same file name, regardless of size or content\n"
    "  date       : Modified on the same calendar day\n"
    "Example:\n"
    "  %(prog)s -i ~/Downloads --mode filename"
)

EPILOG_TEXT = """
Examples:
  Basic usage - find exact duplicates in Downloads folder
  %(prog)s -i ~/Downloads

  Scan several folders at once and verify text files by content
  %(prog)s -i ~/Documents ~/Backup --mode content

  Machine-readable report (same shape as the completion event)
  %(prog)s -i ~/Downloads --json > report.json

  Press Ctrl+C during hashing to stop early and print partial results
"""
