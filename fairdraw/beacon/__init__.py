from .api import BeaconClient, BeaconInfo, BeaconRound

__all__ = ["BeaconClient", "BeaconInfo", "BeaconRound"]
