"""
Configuration constants to replace magic values throughout template_tokens
"""

# Path syntax
ARGUMENT_PREFIX = "@"                    # {{@name}}, <@Foo />: caller-supplied arguments
ANGLE_SEGMENT_SEPARATOR = "::"           # <Foo::Bar />
CURLY_SEGMENT_SEPARATORS = (".", "/")    # {{foo.bar}}, {{foo/bar}}
TOKEN_SEGMENT_SEPARATOR = "/"            # normalized token: foo/bar
WORD_SEPARATOR = "-"                     # dasherized words: my-component
NAMED_BLOCK_PREFIX = ":"                 # <:header> named block slots

# HTML elements that never take a closing tag
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "command", "embed", "hr", "img", "input",
    "keygen", "link", "meta", "param", "source", "track", "wbr",
})

# Source handling
DEFAULT_SOURCE_FILE = "<template>"
DEFAULT_FILE_ENCODING = "utf-8"
TEMPLATE_FILE_EXTENSIONS = (".hbs", ".handlebars")

# Diagnostics
COLOR_ENV_VAR = "TEMPLATE_TOKENS_COLOR"
NO_COLOR_ENV_VAR = "NO_COLOR"
