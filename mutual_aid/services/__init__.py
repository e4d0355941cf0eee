"""Services Layer — imperative shell around the pure core.

Invariants:
    - Only HelpRequestStore writes help_requests / help_request_articles
    - Services load state, call core rules, persist — never the other way round
"""
