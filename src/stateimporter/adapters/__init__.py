"""Adapters connecting the reconciliation engine to Azure, Terraform and files."""
