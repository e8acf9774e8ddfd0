from relay_server.config.settings import GitHubConfig, Settings

__all__ = ["GitHubConfig", "Settings"]
