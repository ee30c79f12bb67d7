"""
Service identification attached to every log line.

`<service>@<environment>:<instance>` where the instance is the container
hostname when running in a container and the PID otherwise.
"""

from functools import lru_cache
import os


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'club-reservation')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Containers get a random hostname; keep the first 8 chars for brevity
    instance = os.getenv('HOSTNAME', '')[:8] if os.path.exists('/.dockerenv') else ''
    return f'{service_name}@{deploy_env}:{instance or os.getpid()}'
