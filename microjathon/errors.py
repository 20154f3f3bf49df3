class JathonError(Exception):
    """Base exception for every fatal MicroJathon failure.

    `kind` names the failure class and `message` describes the offending
    operator or value. Errors are never caught inside an evaluation or
    compilation pass; they abort it.
    """
    kind = 'Error'

    def __init__(self, message: str):
        super().__init__(f"{self.kind}: {message}")
        self.message = message


class TypeMismatch(JathonError):
    """Operator applied to an unsupported combination of value kinds."""
    kind = 'TypeMismatch'


class UnsupportedOperator(JathonError):
    """An operator symbol outside the recognised set reached evaluation."""
    kind = 'UnsupportedOperator'


class UnsupportedFeature(JathonError):
    """A construct the code generator cannot lower (floats, round())."""
    kind = 'UnsupportedFeature'


class MissingLiteralEntry(JathonError):
    """A string-typed variable has no literal pool entry at codegen time."""
    kind = 'MissingLiteralEntry'


class InvalidCoercion(JathonError):
    """A value cannot be coerced to the numeric or boolean form required."""
    kind = 'InvalidCoercion'


class DivisionByZero(JathonError):
    """The right operand of `/` is zero."""
    kind = 'DivisionByZero'
