"""
Licenses module - single-use license key management.

This module handles:
- LicenseKey entity and domain logic
- License key issuance for purchases
- License key redemption
- License key lookup by purchaser email
"""
