"""ProDialer admin backend: call analytics, reports and exports."""
