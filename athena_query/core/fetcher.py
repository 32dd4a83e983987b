from typing import Optional, Tuple
from urllib.parse import urlparse

from athena_query.core.athena_models import FetchOptions, Page, QueryExecution
from athena_query.core.decoder import ResultDecoder
from athena_query.core.ports import ExecutionService, ObjectStore
from athena_query.core.type_catalog import TypeCatalog
from athena_query.utils.logger import get_logger

logger = get_logger(__name__)


def split_s3_location(location: Optional[str]) -> Tuple[str, str]:
    """s3://bucket/path/to/file.csv -> ("bucket", "path/to/file.csv")"""
    parsed = urlparse(location or "")
    if parsed.scheme != "s3" or not parsed.netloc:
        raise ValueError(f"Not an s3 path: {location}")
    return parsed.netloc, parsed.path.lstrip("/")


class ResultFetcher:
    """
    Retrieves the results of a SUCCEEDED execution.

    DDL/utility output is read from the result object as text lines.
    Paginated DML goes through GetQueryResults; unpaginated DML reads the
    whole CSV result object.
    """

    def __init__(
        self,
        execution_service: ExecutionService,
        object_store: ObjectStore,
        decoder: Optional[ResultDecoder] = None,
    ):
        self.execution_service = execution_service
        self.object_store = object_store
        self.decoder = decoder or ResultDecoder()

    async def fetch(self, execution: QueryExecution, options: FetchOptions) -> Page:
        statement_type = execution.statement_type
        if statement_type is not None and statement_type.is_non_tabular:
            stream = await self._download(execution)
            page = Page(records=self.decoder.decode_lines(stream))
        elif options.paginated:
            page = await self._fetch_page(execution, options)
        else:
            stream = await self._download(execution)
            if options.format_json:
                catalog = await TypeCatalog.resolve(self.execution_service, execution.execution_id)
                records = self.decoder.decode_delimited(
                    stream,
                    catalog,
                    ignore_empty_lines=options.ignore_empty_lines,
                    flatten_nested_keys=options.flatten_nested_keys,
                )
            else:
                records = self.decoder.raw_lines(stream)
            page = Page(records=records)

        logger.info(
            "results_fetched",
            execution_id=execution.execution_id,
            statement_type=statement_type.value if statement_type else None,
            paginated=options.paginated,
            record_count=len(page.records),
            has_next_page=page.next_token is not None
        )
        return page

    async def _fetch_page(self, execution: QueryExecution, options: FetchOptions) -> Page:
        # Only the first page carries the header row.
        header_rows = 0 if options.next_token else 1
        response = await self.execution_service.get_results_page(
            execution.execution_id,
            options.page_size + header_rows,
            options.next_token,
        )
        rows = response.get("ResultSet", {}).get("Rows", [])
        next_token = response.get("NextToken")

        if not options.format_json:
            return Page(records=list(rows), next_token=next_token, raw_response=dict(response))

        catalog = await TypeCatalog.resolve(self.execution_service, execution.execution_id)
        records = self.decoder.decode_positional(rows, catalog, skip_rows=header_rows)
        return Page(records=records, next_token=next_token)

    async def _download(self, execution: QueryExecution):
        bucket, key = split_s3_location(execution.output_location)
        return await self.object_store.get_object(bucket, key)
