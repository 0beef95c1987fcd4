"""
Swap log view.

Ties the pair directory, the swap log fetcher and the grid together: the
user picks a pair, loads its swaps, then sorts, filters, resizes and
exports the grid.
"""

import logging
from pathlib import Path
from typing import Any

from web3 import Web3

from .column_store import ColumnWidthStore, LocalStorage
from .config import SwapLogConfig
from .exporter import export_to_excel
from .grid import ColumnFilter, ColumnSpec, GridConfig, SortSpec, build_grid_config, filter_records, sort_records
from .models import FormattedPairOption, SwapRecord
from .pair_directory import PairDirectoryClient, QueryResultCache
from .swap_log_fetcher import SwapLogFetcher
from .utils.notifier import ConsoleNotifier, Notifier

# Get logger for this module
logger = logging.getLogger(__name__)


class SwapLogView:
    """
    Swap log page: a pair selector, a load action and the swap grid.
    """

    def __init__(
        self,
        config: SwapLogConfig,
        notify: Notifier | None = None,
        pair_client: PairDirectoryClient | None = None,
        fetcher: SwapLogFetcher | None = None,
        width_store: ColumnWidthStore | None = None
    ) -> None:
        """
        Initialize the view with configuration.

        :param config: Viewer configuration object
        :param notify: Callback showing messages to the user
        :param pair_client: Pair directory client (built from config by default)
        :param fetcher: Swap log fetcher (built from config by default)
        :param width_store: Column width store (backed by config.storage_path by default)
        """
        self.config = config
        self.notify = notify or ConsoleNotifier()
        self.pair_client = pair_client or PairDirectoryClient(
            config=config.directory,
            cache=QueryResultCache(),
            request_timeout=config.request_timeout
        )
        self.fetcher = fetcher or SwapLogFetcher(config=config, notify=self.notify)
        self.width_store = width_store or ColumnWidthStore(LocalStorage(config.storage_file))

        self.grid: GridConfig | None = None
        self.pair_options: list[FormattedPairOption] = []
        self.selected_value: str | None = None
        self.contract_label = "Contract:"
        self.records: list[SwapRecord] = []

    async def initialize(self) -> None:
        """
        Build the grid from stored column widths and load the pair options.
        """
        column_widths = self.width_store.load()
        self.grid = build_grid_config(
            column_widths,
            on_column_resize=self._on_column_resize,
            explorer_url=self.config.rpc.explorer_url
        )
        logger.debug(f"Column widths: {self.grid.column_widths()}")
        await self.refresh_pairs()

    async def refresh_pairs(self) -> bool:
        """
        Load the pair options from the directory.

        A failed query leaves the options empty and can be retried.

        :return: True if the options were loaded
        """
        try:
            self.pair_options = await self.pair_client.list_formatted_pairs()
            logger.info(f"Loaded {len(self.pair_options)} pair options")
            return True
        except Exception as e:
            logger.error(f"Error loading pairs: {e}", exc_info=True)
            self.pair_options = []
            self.notify(f"Error loading pairs: {e}")
            return False

    def search_pairs(self, term: str) -> list[FormattedPairOption]:
        """Options whose text contains term, ignoring case."""
        term = term.lower()
        return [option for option in self.pair_options if term in option.text.lower()]

    def select(self, value: str | None, allow_address: bool = False) -> FormattedPairOption | None:
        """
        Select a pair by pool id or by its "TOKEN0:TOKEN1" text.

        An unknown value clears the selection, unless allow_address is set
        and the value is a contract address not listed by the directory.

        :param value: Pool id, option text, or None
        :param allow_address: Accept unlisted contract addresses
        :return: The selected option, or None
        """
        self.selected_value = None
        if not value:
            return None

        for option in self.pair_options:
            if value.lower() in (option.value.lower(), option.text.lower()):
                self.selected_value = option.value
                logger.info(f"Selected address: {option.value}")
                return option

        if allow_address and Web3.is_address(value):
            self.selected_value = value
            logger.info(f"Selected unlisted address: {value}")
            return None

        logger.warning(f"No pair matches {value!r}")
        return None

    async def load(self) -> list[SwapRecord]:
        """
        Fetch the swap log of the selected pair into the grid.

        :return: The new dataset
        """
        contract_address = self.selected_value
        if not contract_address:
            self.notify("Please select a contract address.")
            return self.records

        self.contract_label = f"Contract: {contract_address}"
        records = await self.fetcher.fetch_swap_logs(contract_address)

        # Replace, never merge
        self.records = records
        logger.info(f"Grid holds {len(self.records)} swaps")
        return self.records

    def _on_column_resize(self, columns: list[ColumnSpec]) -> None:
        self.width_store.save([column.width for column in columns])

    def resize_column(self, column: int | str, width: int) -> None:
        """Resize a column, given by index or field name, and persist all widths."""
        grid = self._require_grid()
        index = column if isinstance(column, int) else grid.columns.index(grid.column(column))
        grid.resize_column(index, width)

    def rows(
        self,
        filters: list[ColumnFilter] | None = None,
        sort: SortSpec | None = None
    ) -> list[dict[str, Any]]:
        """
        Dataset rows, filtered and sorted (default sort Block descending).
        """
        grid = self._require_grid()
        rows = [record.to_dict() for record in self.records]
        rows = filter_records(rows, filters or [])
        return sort_records(rows, sort or grid.default_sort)

    def export(self, directory: Path | str = ".", sort: SortSpec | None = None) -> Path:
        """
        Export the whole dataset to a spreadsheet, ignoring view filters.
        """
        grid = self._require_grid()
        rows = self.rows(sort=sort)
        return export_to_excel(rows, grid.columns, grid.export_options, directory)

    def _require_grid(self) -> GridConfig:
        if self.grid is None:
            raise RuntimeError("SwapLogView is not initialized, call initialize() first")
        return self.grid
