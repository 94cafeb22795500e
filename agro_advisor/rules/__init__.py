"""
Rule layer: the immutable condition database and its query.

Modules
-------
store   : load_rule_table() + parse_rule_document() — JSON → RuleTable,
          degrading to an empty table on failure.
matcher : find_rules() + rule_matches() — condition predicate and stable
          confidence ordering. Pure functions, no I/O.
"""
