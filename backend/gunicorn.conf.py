# WSGI entry point
wsgi_app = "accounts_api:create_app()"

# Bind & workers
bind = "0.0.0.0:8000"
workers = 2  # override with env GUNICORN_WORKERS
threads = 1
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Trust proxy headers; the app applies ProxyFix itself
forwarded_allow_ips = "*"
proxy_protocol = False
