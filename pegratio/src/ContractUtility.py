"""ContractUtility: Web3 initialization, ABI loading and block snapshots."""

import json
import os
from pathlib import Path
from typing import Any

from sapphirepy import sapphire
from web3 import Web3

from .Reading import BlockContext

NETWORKS = {
    "sapphire": "https://sapphire.oasis.io",
    "sapphire-testnet": "https://testnet.sapphire.oasis.io",
    "sapphire-localnet": "http://localhost:8545",
}


class ContractUtility:
    """Utility for Web3 connection and contract ABI loading.

    :ivar network: Network RPC URL.
    :ivar w3: Configured Web3 instance, Sapphire-wrapped on Sapphire networks.
    """

    def __init__(self, network_name: str) -> None:
        """Initialize the contract utility.

        :param network_name: Name of a known network, or an RPC URL.
        """
        # RPC_URL env var overrides the default for the network
        self.network = os.environ.get("RPC_URL") or NETWORKS.get(network_name, network_name)

        self.w3 = Web3(Web3.HTTPProvider(self.network))
        if network_name in NETWORKS:
            self.w3 = sapphire.wrap(self.w3)

    @staticmethod
    def get_abi(abi_name: str) -> list:
        """Load a bundled contract ABI from the abi folder.

        :param abi_name: Name of the ABI (e.g., "AggregatorV2V3Interface").
        :returns: ABI as a list of entries.
        """
        abi_path = (Path(__file__).parent.parent / "abi" / f"{abi_name}.json").resolve()

        with open(abi_path, "r") as file:
            contract_data = json.load(file)

        return contract_data["abi"]

    def get_contract(self, address: str, abi_name: str) -> Any:
        """Build a contract instance for a deployed address.

        :param address: Contract address (checksummed or not).
        :param abi_name: Name of the bundled ABI.
        :returns: web3 Contract instance.
        """
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=self.get_abi(abi_name),
        )

    def block_context(self) -> BlockContext:
        """Snapshot the latest block for one evaluation.

        :returns: BlockContext pinned to the latest block number and its timestamp.
        """
        block = self.w3.eth.get_block("latest")
        return BlockContext(block_identifier=block["number"], timestamp=block["timestamp"])
