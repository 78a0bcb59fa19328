"""Template tokens, the template scanner, and syntax tree node types."""