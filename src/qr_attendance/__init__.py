"""QR attendance package.

Short-lived QR sessions are redeemed into a per-day attendance ledger, which
feeds attendance analytics. Organized by feature modules (sessions,
redemption, ledger, analytics, roster) with thin Flask controllers over
service/repository layers.
"""
