"""Naming rules for generated files and variables.

All escaping and naming used by the renderers lives here so the rules can be
tested on their own:

- document identifiers become file names (`id_to_file_name`)
- file names become per-document import names (`document_variable_name`)
- type definitions become exported data variable names (`get_data_variable_name`)
"""

import re
from collections import defaultdict
from collections.abc import Iterable

import inflection

from dotpkg.errors import InvalidGeneratedNameError, NamingCollisionError
from dotpkg.schema import DocumentTypeDef

_LEADING_DIGIT_RE = re.compile(r"^[0-9]")

# Word boundaries: lower/digit followed by upper, and the end of an acronym.
_SPLIT_RES = (
    re.compile(r"([a-z0-9])([A-Z])"),
    re.compile(r"([A-Z])([A-Z][a-z])"),
)
# Underscores survive so escaped path separators stay visible in import names.
_STRIP_RE = re.compile(r"[^A-Z0-9_]+", re.IGNORECASE)

# Names that read as singular and plural alike in content schemas.
_UNCOUNTABLE_WORDS = frozenset({"settings", "metadata"})

_LAST_WORD_RE = re.compile(r"([A-Z]?[a-z0-9]+|[A-Z]+)$")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Reserved words of ES modules and TypeScript declarations.
_RESERVED_WORDS = frozenset(
    {
        "await", "break", "case", "catch", "class", "const", "continue", "debugger",
        "default", "delete", "do", "else", "enum", "export", "extends", "false",
        "finally", "for", "function", "if", "implements", "import", "in",
        "instanceof", "interface", "let", "new", "null", "package", "private",
        "protected", "public", "return", "static", "super", "switch", "this",
        "throw", "true", "try", "typeof", "var", "void", "while", "with", "yield",
    }
)


def lowercase_first_char(value: str) -> str:
    return value[:1].lower() + value[1:]


def uppercase_first_char(value: str) -> str:
    return value[:1].upper() + value[1:]


def id_to_file_name(document_id: str) -> str:
    """Turn a document identifier into a single file name segment.

    Identifiers starting with a digit get a leading underscore, then every
    `/` becomes `__`.

    Args:
        document_id: Identifier of the document, possibly a nested path.

    Returns:
        File name without extension.
    """
    if _LEADING_DIGIT_RE.match(document_id):
        document_id = "_" + document_id
    return document_id.replace("/", "__")


def _split_words(value: str) -> list[str]:
    for split_re in _SPLIT_RES:
        value = split_re.sub("\\1\0\\2", value)
    value = _STRIP_RE.sub("\0", value).strip("\0")
    return [word for word in value.split("\0") if word]


def camel_case(value: str) -> str:
    """Camel-case a string, keeping underscores inside words.

    Words after the first that start with a digit are prefixed with an
    underscore so the result stays a valid identifier.
    """
    result = []
    for index, word in enumerate(_split_words(value)):
        if index == 0:
            result.append(word.lower())
        elif word[0].isdigit():
            result.append("_" + word[0] + word[1:].lower())
        else:
            result.append(word[0].upper() + word[1:].lower())
    return "".join(result)


def document_variable_name(document_id: str) -> str:
    """Name under which a collection barrel imports one document."""
    return camel_case(id_to_file_name(document_id))


def _is_uncountable(word: str) -> bool:
    match = _LAST_WORD_RE.search(word)
    last_word = match.group(1) if match else word
    return last_word.lower() in _UNCOUNTABLE_WORDS


def singularize(word: str) -> str:
    if _is_uncountable(word):
        return word
    return inflection.singularize(word)


def pluralize(word: str) -> str:
    if _is_uncountable(word):
        return word
    return inflection.pluralize(word)


def get_data_variable_name(doc_def: DocumentTypeDef) -> str:
    """Exported variable name of a document type's data.

    Singleton types export their single document as the singular,
    lower-camel type name (`Settings` -> `settings`). Collection types export
    a list named `all` plus the plural type name (`Post` -> `allPosts`).
    """
    if doc_def.is_singleton:
        return lowercase_first_char(singularize(doc_def.name))
    return "all" + uppercase_first_char(pluralize(doc_def.name))


def check_unique_names(pairs: Iterable[tuple[str, str]]) -> None:
    """Verify that distinct sources never share a generated name.

    Args:
        pairs: (source, generated_name) tuples. Repeating the same source is
            allowed.

    Raises:
        NamingCollisionError: For the first generated name (in sorted order)
            claimed by more than one source.
    """
    sources_by_name: dict[str, set[str]] = defaultdict(set)
    for source, generated_name in pairs:
        sources_by_name[generated_name].add(source)

    for generated_name in sorted(sources_by_name):
        sources = sources_by_name[generated_name]
        if len(sources) > 1:
            raise NamingCollisionError(generated_name, list(sources))


def is_valid_identifier(name: str) -> bool:
    """Return True when name can be declared as a variable or type in generated code."""
    return bool(_IDENTIFIER_RE.match(name)) and name not in _RESERVED_WORDS


def check_valid_identifiers(pairs: Iterable[tuple[str, str]]) -> None:
    """Verify that every generated name is a usable identifier.

    Args:
        pairs: (source, generated_name) tuples.

    Raises:
        InvalidGeneratedNameError: For the first pair (in sorted order) whose
            generated name is empty, malformed or a reserved word.
    """
    for source, generated_name in sorted(pairs):
        if not is_valid_identifier(generated_name):
            raise InvalidGeneratedNameError(generated_name, source)
