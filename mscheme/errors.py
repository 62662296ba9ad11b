class SchemeError(Exception):
    """ Base class for all mscheme errors"""
    label = "Error"


class SchemeSyntaxError(SchemeError):
    """ Raised for malformed tokens, expressions or special-form shapes"""
    label = "Syntax error"


class SchemeNameError(SchemeError):
    """ Raised when a symbol is looked up or assigned before it is bound"""
    label = "Name error"


class SchemeRuntimeError(SchemeError):
    """ Raised for type mismatches, wrong arity and other value-domain violations"""
    label = "Runtime error"
