"""
Syntax Highlighter Service - Regex-based token coloring for the plain code view
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass

from models.optimize import LanguageInfo, Token


@dataclass(frozen=True)
class LanguageDefinition:
    """Token patterns for a single language"""

    id: str
    name: str
    extension: str
    keywords: frozenset[str]
    line_comment: str = r"//[^\n]*"
    block_comment: str | None = r"/\*[\s\S]*?\*/"
    strings: str = r"\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*'"


_C_STRINGS = r"\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*'"
_JS_STRINGS = r"`(?:\\.|[^`\\])*`|" + _C_STRINGS
_PY_STRINGS = r"\"\"\"[\s\S]*?\"\"\"|'''[\s\S]*?'''|" + _C_STRINGS

_JS_KEYWORDS = {
    "async", "await", "break", "case", "catch", "class", "const", "continue",
    "default", "delete", "do", "else", "export", "extends", "false", "finally",
    "for", "function", "if", "import", "in", "instanceof", "let", "new",
    "null", "return", "super", "switch", "this", "throw", "true", "try",
    "typeof", "undefined", "var", "void", "while", "yield", "of", "from",
}

LANGUAGES: dict[str, LanguageDefinition] = {
    "javascript": LanguageDefinition(
        id="javascript",
        name="JavaScript",
        extension="js",
        keywords=frozenset(_JS_KEYWORDS),
        strings=_JS_STRINGS,
    ),
    "typescript": LanguageDefinition(
        id="typescript",
        name="TypeScript",
        extension="ts",
        keywords=frozenset(
            _JS_KEYWORDS
            | {"interface", "type", "enum", "implements", "private", "public",
               "protected", "readonly", "abstract", "as", "any", "number",
               "string", "boolean", "never", "unknown", "keyof", "namespace"}
        ),
        strings=_JS_STRINGS,
    ),
    "python": LanguageDefinition(
        id="python",
        name="Python",
        extension="py",
        keywords=frozenset({
            "False", "None", "True", "and", "as", "assert", "async", "await",
            "break", "class", "continue", "def", "del", "elif", "else", "except",
            "finally", "for", "from", "global", "if", "import", "in", "is",
            "lambda", "nonlocal", "not", "or", "pass", "raise", "return", "try",
            "while", "with", "yield", "self",
        }),
        line_comment=r"#[^\n]*",
        block_comment=None,
        strings=_PY_STRINGS,
    ),
    "java": LanguageDefinition(
        id="java",
        name="Java",
        extension="java",
        keywords=frozenset({
            "abstract", "boolean", "break", "byte", "case", "catch", "char",
            "class", "continue", "default", "do", "double", "else", "enum",
            "extends", "final", "finally", "float", "for", "if", "implements",
            "import", "instanceof", "int", "interface", "long", "new", "null",
            "package", "private", "protected", "public", "return", "short",
            "static", "super", "switch", "this", "throw", "throws", "try",
            "void", "while", "true", "false", "var",
        }),
    ),
    "cpp": LanguageDefinition(
        id="cpp",
        name="C++",
        extension="cpp",
        keywords=frozenset({
            "auto", "bool", "break", "case", "catch", "char", "class", "const",
            "constexpr", "continue", "default", "delete", "do", "double", "else",
            "enum", "explicit", "false", "float", "for", "if", "include", "inline",
            "int", "long", "namespace", "new", "nullptr", "private", "protected",
            "public", "return", "short", "sizeof", "static", "std", "struct",
            "switch", "template", "this", "throw", "true", "try", "typename",
            "unsigned", "using", "virtual", "void", "while",
        }),
    ),
    "csharp": LanguageDefinition(
        id="csharp",
        name="C#",
        extension="cs",
        keywords=frozenset({
            "abstract", "as", "async", "await", "bool", "break", "case", "catch",
            "class", "const", "continue", "decimal", "default", "do", "double",
            "else", "enum", "false", "finally", "float", "for", "foreach", "if",
            "int", "interface", "internal", "is", "long", "namespace", "new",
            "null", "out", "override", "private", "protected", "public",
            "readonly", "ref", "return", "static", "string", "struct", "switch",
            "this", "throw", "true", "try", "using", "var", "virtual", "void",
            "while",
        }),
    ),
    "go": LanguageDefinition(
        id="go",
        name="Go",
        extension="go",
        keywords=frozenset({
            "break", "case", "chan", "const", "continue", "default", "defer",
            "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
            "interface", "map", "package", "range", "return", "select", "struct",
            "switch", "type", "var", "nil", "true", "false",
        }),
        strings=r"`[^`]*`|" + _C_STRINGS,
    ),
    "rust": LanguageDefinition(
        id="rust",
        name="Rust",
        extension="rs",
        keywords=frozenset({
            "as", "async", "await", "break", "const", "continue", "crate", "else",
            "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let",
            "loop", "match", "mod", "move", "mut", "pub", "ref", "return", "self",
            "Self", "static", "struct", "super", "trait", "true", "type", "unsafe",
            "use", "where", "while",
        }),
        strings=r"\"(?:\\.|[^\"\\])*\"",
    ),
}

GENERIC = LanguageDefinition(
    id="text",
    name="Plain Text",
    extension="txt",
    keywords=frozenset(),
    line_comment=r"//[^\n]*|#[^\n]*",
)

ALIASES = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "c++": "cpp",
    "cxx": "cpp",
    "c#": "csharp",
    "cs": "csharp",
    "golang": "go",
    "rs": "rust",
}

_NUMBER = r"\b(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)\b"
_WORD = r"[A-Za-z_$][A-Za-z0-9_$]*"

_pattern_cache: dict[str, re.Pattern] = {}


def resolve_language(language: str) -> LanguageDefinition:
    """Look up a language by id or alias, falling back to the generic definition"""
    key = (language or "").strip().lower()
    key = ALIASES.get(key, key)
    return LANGUAGES.get(key, GENERIC)


def supported_languages() -> list[LanguageInfo]:
    return [
        LanguageInfo(id=lang.id, name=lang.name, extension=lang.extension)
        for lang in LANGUAGES.values()
    ]


def _token_pattern(lang: LanguageDefinition) -> re.Pattern:
    if lang.id not in _pattern_cache:
        comment = lang.line_comment
        if lang.block_comment:
            comment = f"{lang.block_comment}|{comment}"
        # Order matters: comments and strings swallow keywords inside them
        _pattern_cache[lang.id] = re.compile(
            f"(?P<comment>{comment})"
            f"|(?P<string>{lang.strings})"
            f"|(?P<number>{_NUMBER})"
            f"|(?P<word>{_WORD})"
        )
    return _pattern_cache[lang.id]


def tokenize(code: str, language: str) -> list[Token]:
    """Split code into typed tokens. Joining token texts gives back the input."""
    lang = resolve_language(language)
    pattern = _token_pattern(lang)
    tokens: list[Token] = []
    plain = []
    pos = 0

    def flush_plain():
        if plain:
            tokens.append(Token(type="plain", text="".join(plain)))
            plain.clear()

    for match in pattern.finditer(code):
        if match.start() > pos:
            plain.append(code[pos:match.start()])
        pos = match.end()

        kind = match.lastgroup
        text = match.group()
        if kind == "word":
            if text not in lang.keywords:
                plain.append(text)
                continue
            kind = "keyword"

        flush_plain()
        tokens.append(Token(type=kind, text=text))

    if pos < len(code):
        plain.append(code[pos:])
    flush_plain()

    return tokens


def highlight_html(code: str, language: str) -> str:
    """Render code as escaped HTML with <span class="token-..."> wrappers"""
    parts = []
    for token in tokenize(code, language):
        text = html.escape(token.text)
        if token.type == "plain":
            parts.append(text)
        else:
            parts.append(f'<span class="token-{token.type}">{text}</span>')
    return "".join(parts)
