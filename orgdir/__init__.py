"""
orgdir: organization directory model.

Users, their reporting hierarchy and the invariants that keep it consistent
(field constraints, uniqueness, references, acyclicity, managerId /
directReports symmetry).

Layers:
    domain/          entities, rules, hierarchy mutations, ports
    application/     use cases returning typed results
    infrastructure/  in-memory repositories
    interfaces/      record schema at the persistence boundary
    crosscutting/    config, logging, exceptions
"""

__version__ = "0.1.0"
