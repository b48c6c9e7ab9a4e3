"""Frontmatter extraction, excerpts, and DocumentRecord construction"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import yaml
from pydantic import TypeAdapter

from mdmanifest.core.models import DocumentRecord, ScannedFile
from mdmanifest.errors import FrontmatterError


FRONTMATTER_RE = re.compile(
    r'\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)',
    re.DOTALL | re.MULTILINE,
)
MD_SUFFIX_RE = re.compile(r'\.(md|mdx)$', re.IGNORECASE)
EXCERPT_SEPARATOR = '<!-- more -->'
EXCERPT_LENGTH = 150

_METADATA = TypeAdapter(dict[str, Any])


@dataclass(frozen=True)
class ParsedMarkdown:
    metadata: dict[str, Any] = field(default_factory=dict)
    content:  str = ''
    excerpt:  Optional[str] = None      # explicit excerpt only


FrontmatterParser = Callable[[str, str], ParsedMarkdown]


def _load_metadata(block: str) -> dict[str, Any]:
    """Parse a YAML block into a JSON-compatible mapping with string keys."""
    try:
        data = yaml.safe_load(block) or {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(data, dict):
        raise FrontmatterError(f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}")
    try:
        # dates become ISO strings so a record survives a JSON round trip unchanged
        return _METADATA.dump_python({str(k): v for k, v in data.items()}, mode="json")
    except ValueError as e:
        raise FrontmatterError(f"Unsupported frontmatter value: {e}") from e


def parse_frontmatter(text: str, excerpt_separator: str = EXCERPT_SEPARATOR) -> ParsedMarkdown:
    """Split a leading '---' fenced YAML block from the body and find an explicit excerpt.

    Text without a complete fence is all content with empty metadata. A string
    excerpt_separator key in the frontmatter overrides the given separator.
    Raises FrontmatterError when the block is not a YAML mapping.
    """
    text = text.removeprefix('\ufeff')
    m = FRONTMATTER_RE.match(text)
    if m:
        metadata, content = _load_metadata(m.group(1)), text[m.end():]
    else:
        metadata, content = {}, text

    override = metadata.get('excerpt_separator')
    if isinstance(override, str) and override:
        excerpt_separator = override

    excerpt = None
    if excerpt_separator and excerpt_separator in content:
        excerpt = content.split(excerpt_separator, 1)[0].strip() or None
    return ParsedMarkdown(metadata=metadata, content=content, excerpt=excerpt)


def make_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    return content[:length] + '...'


def parse_file(
    scanned: ScannedFile,
    excerpt_length: int = EXCERPT_LENGTH,
    excerpt_separator: str = EXCERPT_SEPARATOR,
    frontmatter_parser: FrontmatterParser = parse_frontmatter,
    ) -> DocumentRecord:
    """Read and parse one scanned file.

    Raises OSError/UnicodeDecodeError when the file cannot be read and
    FrontmatterError when its metadata block is malformed.
    """
    raw = scanned.path.read_text(encoding='utf-8')
    try:
        parsed = frontmatter_parser(raw, excerpt_separator)
    except FrontmatterError as e:
        raise FrontmatterError(str(e), path=scanned.relative_path, operation='parse') from e

    return DocumentRecord(
        slug=MD_SUFFIX_RE.sub('', scanned.root_path),
        filename=scanned.path.name,
        filepath=scanned.relative_path,
        content=parsed.content,
        metadata=parsed.metadata,
        excerpt=parsed.excerpt or make_excerpt(parsed.content, excerpt_length),
    )
