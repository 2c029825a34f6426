"""HR attendance package.

Feature modules (attendance, leave, journal, reporting, ...) each carry a
domain model, a repository protocol, a MySQL repository, a service and a thin
Flask controller. The rule engines (classifier, ledger, workflow,
aggregation) are pure functions over in-memory records.
"""
