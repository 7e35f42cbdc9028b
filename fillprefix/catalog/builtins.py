"""
Built-in catalog functions.

Each one is a single call of a registry primitive. Classification tags
follow the host's own naming (see core.host.DEFAULT_TABLE).
"""

from .base import PatternCatalog


DEFAULT_CATALOG = PatternCatalog()


# Bullets

@DEFAULT_CATALOG.function("html-bullet", "Treat <li> as a bullet")
def html_bullet(registry, context_id=None, global_scope=False):
    registry.register_add(("<li>", "bullet"), context_id, global_scope)


@DEFAULT_CATALOG.function("plus-bullet", "Treat + as a bullet")
def plus_bullet(registry, context_id=None, global_scope=False):
    registry.register_add(("\\+", "bullet"), context_id, global_scope)


@DEFAULT_CATALOG.function("letter-bullet", "Treat (a), (B) ... as bullets")
def letter_bullet(registry, context_id=None, global_scope=False):
    registry.register_add(("([a-zA-Z])", "bullet"), context_id, global_scope)


@DEFAULT_CATALOG.function("numbered-paren-bullet", "Treat (1), (2) ... as bullets")
def numbered_paren_bullet(registry, context_id=None, global_scope=False):
    registry.register_add(("([0-9]+)", "bullet"), context_id, global_scope)


# Comments

@DEFAULT_CATALOG.function("postscript-comment", "Treat % runs as a comment prefix")
def postscript_comment(registry, context_id=None, global_scope=False):
    registry.register_add(("%+", "postscript-comment"), context_id, global_scope)


@DEFAULT_CATALOG.function("sql-comment", "Treat -- as a comment prefix")
def sql_comment(registry, context_id=None, global_scope=False):
    registry.register_add(("--+", "sql-comment"), context_id, global_scope)


@DEFAULT_CATALOG.function("lisp-comment", "Treat ; runs as a comment prefix")
def lisp_comment(registry, context_id=None, global_scope=False):
    registry.register_add((";+", "lisp-comment"), context_id, global_scope)


@DEFAULT_CATALOG.function("no-shell-comments", "Stop treating # as a comment prefix")
def no_shell_comments(registry, context_id=None, global_scope=False):
    registry.register_remove_by_classification("sh-comment", context_id, global_scope)


# Citations

@DEFAULT_CATALOG.function("arrow-citation", "Treat -> as a citation marker")
def arrow_citation(registry, context_id=None, global_scope=False):
    registry.register_add(("->", "citation->"), context_id, global_scope)


@DEFAULT_CATALOG.function("initials-citation", "Treat JD> style initials as a citation marker")
def initials_citation(registry, context_id=None, global_scope=False):
    registry.register_add(("[A-Z]+>", "citation->"), context_id, global_scope)


@DEFAULT_CATALOG.function("no-citations", "Stop recognizing any citation marker")
def no_citations(registry, context_id=None, global_scope=False):
    registry.register_remove_by_classification("citation->", context_id, global_scope)
