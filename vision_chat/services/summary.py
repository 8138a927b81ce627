"""
Human-readable chat summary of a Cloud Vision response.
"""
import math
from typing import Any, Dict, List

MAX_TEXT_CHARS = 2000
EMPTY_SUMMARY = "Tidak ada label/objek/teks yang berhasil dideteksi."


def _percent(score) -> int:
    # Half rounds up, unlike round()
    return math.floor((score or 0) * 100 + 0.5)


def _scored(items: List[Dict[str, Any]], name_field: str) -> str:
    return ", ".join(f"{item.get(name_field)} ({_percent(item.get('score'))}%)" for item in items)


def build_summary(resp: Dict[str, Any]) -> str:
    """
    Build the summary shown in the chat for one annotated image.

    Sections appear in a fixed order (labels, objects, text, SafeSearch),
    each followed by a blank line; absent sections are skipped.
    """
    summary = ""

    labels = resp.get("labelAnnotations") or []
    if labels:
        summary += "Label terdeteksi:\n" + _scored(labels, "description") + "\n\n"

    objects = resp.get("localizedObjectAnnotations") or []
    if objects:
        summary += "Objek yang dikenali:\n" + _scored(objects, "name") + "\n\n"

    texts = resp.get("textAnnotations") or []
    if texts:
        text = (texts[0].get("description") or "")[:MAX_TEXT_CHARS]
        summary += "Teks terdeteksi:\n" + (text or "-") + "\n\n"

    safe = resp.get("safeSearchAnnotation")
    if safe:
        summary += "Analisis konten (SafeSearch):\n"
        summary += (
            f"Adult: {safe.get('adult') or 'UNKNOWN'}, "
            f"Violence: {safe.get('violence') or 'UNKNOWN'}, "
            f"Racy: {safe.get('racy') or 'UNKNOWN'}\n\n"
        )

    return summary or EMPTY_SUMMARY
