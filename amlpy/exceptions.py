'''
Custom exception classes, for finer grained error handling
'''


class AmlpyException(Exception):
    '''Parent class for all our exceptions'''
    pass


class NotSupportedError(AmlpyException):
    '''Raised when a solver does not support a certain feature or expression'''
    pass

class SolverNotAvailableError(AmlpyException):
    '''Raised when the Python package (or binary) of a solver backend is not installed'''
    pass

class UnsatisfiableError(AmlpyException):
    '''Raised when the solver proves that no feasible assignment exists'''
    pass

class SolverError(AmlpyException):
    '''Raised when the solver ends without a solution for any other reason (limits, numerical trouble, ...)'''
    pass

class InvalidBoardError(AmlpyException):
    '''Raised when a Sudoku board does not have shape 9x9 or holds digits outside 0..9'''
    pass

class PuzzleSourceError(AmlpyException):
    '''Raised when a puzzle provider can not deliver a board (network failure, bad payload, unknown level)'''
    pass
