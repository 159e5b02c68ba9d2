"""
satloop: incremental SAT solving with refinement loops

A thin incremental layer over a CDCL search backend (variables, literals,
clauses, assumption-scoped solves, model snapshots) plus a generic
solve/validate/block refinement loop for properties that plain CNF cannot
state directly, such as solution uniqueness or single-loop connectivity.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
