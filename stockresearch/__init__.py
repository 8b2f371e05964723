"""Stock research API: multi-provider financial data reconciliation."""
