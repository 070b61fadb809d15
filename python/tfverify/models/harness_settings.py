# tfverify/models/harness_settings.py

from pydantic_settings import BaseSettings


class HarnessSettings(BaseSettings):
    """
    Pydantic settings for the external tools the harness drives.
    By default, these fields map to environment variables prefixed with `TFVERIFY_`.
    For example, `TFVERIFY_TERRAFORM_BIN=tofu` or `TFVERIFY_CONTAINER_NETWORK=bridge`.
    """

    terraform_bin: str = "terraform"
    docker_bin: str = "docker"
    container_label: str = "modules-test=true"
    container_network: str = "host"
    default_shell: str = "sh"
    keep_alive_command: str = "sleep infinity"

    class Config:
        env_prefix = "TFVERIFY_"
