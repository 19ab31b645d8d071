"""
Configuration for the hwsign CLI.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from hwsign.network import DEFAULT_NETWORKS, NetworkParams, NetworkTable


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HWSIGN_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    coin_name: str = "bitcoin"

    # Account-level extended public key (e.g. m/44'/0'/0')
    account_xpub: str = ""

    # Extra or replacement networks, JSON encoded in the environment
    networks: dict[str, NetworkParams] = {}

    log_level: str = "INFO"

    def network_table(self) -> NetworkTable:
        table = DEFAULT_NETWORKS
        for name, params in self.networks.items():
            table = table.with_network(name, params)
        return table


def get_settings() -> Settings:
    return Settings()
