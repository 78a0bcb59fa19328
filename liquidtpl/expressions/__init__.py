"""The Liquid expression language: lexer, compiler, value operations, evaluation context and errors."""