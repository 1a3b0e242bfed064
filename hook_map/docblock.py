import re
from dataclasses import dataclass, field
from typing import List, Optional

PARAM_PATTERN = re.compile(r"^@param\s+(?:(\S+)\s+)?(&?\.{0,3}\$\w+)\s*(.*)$")
RETURN_PATTERN = re.compile(r"^@return\s+(\S+)\s*(.*)$")


@dataclass
class DocParam:
    name: str
    type: str = ""
    description: str = ""


@dataclass
class DocReturn:
    type: str = ""
    description: str = ""


@dataclass
class DocBlock:
    summary: str = ""
    description: str = ""
    params: List[DocParam] = field(default_factory=list)
    returns: Optional[DocReturn] = None


def comment_lines(raw: str) -> List[str]:
    """Comment body with the /** */ delimiters and leading asterisks removed."""
    body = raw.strip()
    body = re.sub(r"^/\*+", "", body)
    body = re.sub(r"\*+/$", "", body)

    lines = []
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        lines.append(line.rstrip())
    return lines


def parse_docblock(raw: Optional[str]) -> Optional[DocBlock]:
    """Split a doc comment into summary, description, @param and @return tags."""
    if not raw:
        return None

    doc = DocBlock()
    text_lines: List[str] = []
    current_tag = None

    for line in comment_lines(raw):
        if line.startswith("@"):
            current_tag = None
            param_match = PARAM_PATTERN.match(line)
            if param_match:
                current_tag = DocParam(
                    name=param_match.group(2),
                    type=param_match.group(1) or "",
                    description=param_match.group(3).strip(),
                )
                doc.params.append(current_tag)
                continue

            return_match = RETURN_PATTERN.match(line)
            if return_match:
                current_tag = DocReturn(
                    type=return_match.group(1),
                    description=return_match.group(2).strip(),
                )
                doc.returns = current_tag
            continue

        if current_tag is not None:
            # Continuation of a multi-line tag description
            if line:
                joined = (current_tag.description + " " + line.strip()).strip()
                current_tag.description = joined
            else:
                current_tag = None
            continue

        text_lines.append(line)

    paragraphs = _paragraphs(text_lines)
    if paragraphs:
        doc.summary = paragraphs[0]
        doc.description = "\n\n".join(paragraphs[1:])

    return doc


def _paragraphs(lines: List[str]) -> List[str]:
    paragraphs = []
    current: List[str] = []
    for line in lines:
        if line:
            current.append(line.strip())
        elif current:
            paragraphs.append(" ".join(current))
            current = []
    if current:
        paragraphs.append(" ".join(current))
    return paragraphs
