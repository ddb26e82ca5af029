"""
File Classifier

Pure mapping from an uploaded item's declared hint, form field and file
name to a semantic file category. Never raises.
"""

from typing import Dict, Optional

from .value_objects import FileCategory

# Dedicated upload slots win over the file extension.
FIELD_NAME_CATEGORIES: Dict[str, FileCategory] = {
    "passport_file": FileCategory.PASSPORT,
    "passport": FileCategory.PASSPORT,
    "photo_3x4": FileCategory.PHOTO_3X4,
    "avatar": FileCategory.AVATAR,
    "certificate": FileCategory.CERTIFICATE,
    "certificate_file": FileCategory.CERTIFICATE,
}

EXTENSION_CATEGORIES: Dict[str, FileCategory] = {
    ".jpg": FileCategory.IMAGE,
    ".jpeg": FileCategory.IMAGE,
    ".png": FileCategory.IMAGE,
    ".gif": FileCategory.IMAGE,
    ".webp": FileCategory.IMAGE,
    ".pdf": FileCategory.DOCUMENT,
    ".doc": FileCategory.DOCUMENT,
    ".docx": FileCategory.DOCUMENT,
    ".txt": FileCategory.DOCUMENT,
    ".xls": FileCategory.DOCUMENT,
    ".xlsx": FileCategory.DOCUMENT,
}

DEFAULT_CATEGORY = FileCategory.DOCUMENT


def file_extension(original_name) -> str:
    """
    Lower-cased extension including the dot, or "" when there is none.

    Hidden-file names such as ".env" have no extension.
    """
    if not isinstance(original_name, str):
        return ""
    base = original_name.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    if dot <= 0 or dot == len(base) - 1:
        return ""
    return base[dot:].lower()


def classify_by_extension(original_name) -> FileCategory:
    return EXTENSION_CATEGORIES.get(file_extension(original_name), DEFAULT_CATEGORY)


def classify(
    field_name: Optional[str],
    original_name: Optional[str],
    category_hint: Optional[str] = None,
) -> FileCategory:
    """
    Assign a category to one upload item.

    Priority: valid explicit hint, then dedicated field name, then file
    extension, then the generic document category.

    Args:
        field_name: Form field the item was posted under
        original_name: Client-side file name
        category_hint: Optional declared category

    Returns:
        Exactly one FileCategory
    """
    hinted = FileCategory.parse(category_hint)
    if hinted is not None:
        return hinted

    if isinstance(field_name, str):
        slot = FIELD_NAME_CATEGORIES.get(field_name.strip().lower())
        if slot is not None:
            return slot

    return classify_by_extension(original_name)


def has_extension(original_name) -> bool:
    return file_extension(original_name) != ""


def is_allowed_mime_type(mime_type, allowed_mime_types) -> bool:
    """Case-insensitive membership test; parameters after ";" are ignored."""
    if not isinstance(mime_type, str) or not mime_type.strip():
        return False
    base = mime_type.split(";", 1)[0].strip().lower()
    return base in {m.lower() for m in allowed_mime_types}
