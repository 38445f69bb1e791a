"""Shared constants for the acceptance test.

Values match testdata/kubeconfig.yaml and the Dex static password
configured for the test cluster.
"""

# kubectl invocation
KUBECTL = "kubectl"
KUBECTL_ARGS = ["--user=oidc", "-n", "dex", "get", "deploy"]
KUBECONFIG_PATHS = ["testdata/kubeconfig.yaml", "kubeconfig.yaml"]
TOKEN_CACHE_DIR = "testdata/token-cache"

# Local server started by the credential plugin, redirects to Dex
LOGIN_URL = "http://localhost:8000"

# Dex static user
DEX_USERNAME = "admin@example.com"
DEX_PASSWORD = "password"

# Dex page selectors
LOGIN_FIELD = "#login"
PASSWORD_FIELD = "#password"
SUBMIT_LOGIN_BUTTON = "#submit-login"
GRANT_ACCESS_BUTTON = ".dex-btn.theme-btn--success"
BODY = "body"

# Page served by the credential plugin after a successful login
EXPECTED_BODY = "OK"

# Time budgets (seconds)
KUBECTL_TIMEOUT = 30.0
BROWSER_TIMEOUT = 20.0
BROWSER_SETTLE_DELAY = 10.0
KILL_GRACE = 5.0
