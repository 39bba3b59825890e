from __future__ import annotations
import html
from datetime import datetime, timezone
from typing import Optional

from .content import Language, message

# Word opens an HTML body saved as .doc; no converter needed on the server
DOC_MEDIA_TYPE = "application/msword"

_DOC_TEMPLATE = """<!DOCTYPE html>
<html xmlns:o="urn:schemas-microsoft-com:office:office" xmlns:w="urn:schemas-microsoft-com:office:word" lang="{lang}">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: 'Times New Roman', serif; font-size: 12pt; line-height: 1.5; }}
h1 {{ font-size: 16pt; text-align: center; }}
.meta {{ color: #555; text-align: center; }}
.narrative {{ white-space: pre-wrap; }}
</style>
</head>
<body>
<p class="meta">{institution}</p>
<h1>{title}</h1>
<p class="meta">{generated_label}: {generated_at}</p>
<hr>
<div class="narrative">{body}</div>
</body>
</html>
"""


def build_report_document(
	narrative: str,
	*,
	language: Language,
	generated_at: Optional[datetime] = None,
	title: Optional[str] = None,
) -> bytes:
	generated_at = generated_at or datetime.now(timezone.utc)
	doc = _DOC_TEMPLATE.format(
		lang=language.value,
		title=html.escape(title or message("report_title", language)),
		institution=html.escape(message("institution", language)),
		generated_label=html.escape(message("generated_at", language)),
		generated_at=generated_at.strftime("%Y-%m-%d %H:%M"),
		body=html.escape(narrative),
	)
	# BOM so Word picks UTF-8 for Cyrillic text
	return "\ufeff".encode("utf-8") + doc.encode("utf-8")


def export_filename(language: Language, generated_at: Optional[datetime] = None) -> str:
	generated_at = generated_at or datetime.now(timezone.utc)
	return f"bulling-tahlil-{language.value}-{generated_at.strftime('%Y%m%d-%H%M')}.doc"
