"""
Marketplace Kernel - transactional ledger for a contractor marketplace

Clients hire contractors under contracts, contracts accrue priced jobs, and
jobs are settled against profile balances with:
- Atomic, zero-sum job payments under row-level locks
- Deposit caps derived from outstanding obligations
- Revenue reporting over paid jobs
"""

__version__ = "0.1.0"
