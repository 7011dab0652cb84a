"""
    Methods to transform amlpy expressions in other expressions (or solver-ready data)

    Used by the solver interfaces to turn modeling expressions into what a solver API accepts.

    ==================
    List of submodules
    ==================
    .. autosummary::
        :nosignatures:

        get_variables
        normalize
        linearize
        differentiate
"""
