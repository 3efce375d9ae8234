"""Resolve AWS SSO permission sets in aws-auth role mappings to IAM role ARNs."""
