from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExecutionRequest(BaseModel):
    """Request to start a query execution."""
    model_config = ConfigDict(frozen=True)

    statement_text: str = Field(..., min_length=1, description="SQL statement to execute")
    target_database: str = Field(..., description="Database the statement runs against")
    target_catalog: str = Field("AwsDataCatalog", description="Data catalog of the database")
    workgroup: str = Field("primary", description="Athena workgroup")
    output_location: Optional[str] = Field(None, description="s3:// override for the result object")
    encryption_config: Optional[Dict[str, Any]] = Field(None, description="ResultConfiguration encryption block")
    bound_parameters: Tuple[str, ...] = Field((), description="Values for ? placeholders, in order")

    @field_validator("output_location")
    @classmethod
    def blank_location_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    def to_start_params(self) -> Dict[str, Any]:
        """Keyword arguments for StartQueryExecution; unset optionals are omitted."""
        result_configuration: Dict[str, Any] = {}
        if self.output_location:
            result_configuration["OutputLocation"] = self.output_location
        if self.encryption_config:
            result_configuration["EncryptionConfiguration"] = dict(self.encryption_config)

        params: Dict[str, Any] = {
            "QueryString": self.statement_text,
            "WorkGroup": self.workgroup,
            "ResultConfiguration": result_configuration,
            "QueryExecutionContext": {
                "Database": self.target_database,
                "Catalog": self.target_catalog,
            },
        }
        if self.bound_parameters:
            params["ExecutionParameters"] = list(self.bound_parameters)
        return params


class QueryState(str, Enum):
    """Possible states of an Athena query."""
    SUBMITTED = "SUBMITTED"
    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (QueryState.SUCCEEDED, QueryState.FAILED, QueryState.CANCELLED)


class StatementType(str, Enum):
    DDL = "DDL"
    DML = "DML"
    UTILITY = "UTILITY"

    @property
    def is_non_tabular(self) -> bool:
        return self in (StatementType.DDL, StatementType.UTILITY)


class QueryExecution(BaseModel):
    """Execution metadata reported by GetQueryExecution."""
    model_config = ConfigDict(frozen=True)

    execution_id: str
    state: QueryState
    state_change_reason: Optional[str] = None
    statement_type: Optional[StatementType] = None
    output_location: Optional[str] = None
    data_scanned_bytes: int = 0
    engine_execution_time_ms: int = 0

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> "QueryExecution":
        execution = response.get("QueryExecution", {})
        status = execution.get("Status", {})
        stats = execution.get("Statistics", {})
        statement_type = execution.get("StatementType")
        return cls(
            execution_id=execution.get("QueryExecutionId", ""),
            state=QueryState(status.get("State", "RUNNING")),
            state_change_reason=status.get("StateChangeReason"),
            statement_type=StatementType(statement_type) if statement_type else None,
            output_location=execution.get("ResultConfiguration", {}).get("OutputLocation"),
            data_scanned_bytes=stats.get("DataScannedInBytes", 0),
            engine_execution_time_ms=stats.get("EngineExecutionTimeInMillis", 0),
        )


class ColumnType(str, Enum):
    """Declared scalar type of a result column."""
    VARCHAR = "varchar"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    INTEGER = "integer"
    TINYINT = "tinyint"
    SMALLINT = "smallint"
    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    OTHER = "other"

    @classmethod
    def parse(cls, name: Optional[str]) -> "ColumnType":
        """Map a service type name to a ColumnType; unknown names become OTHER."""
        try:
            return cls((name or "").lower())
        except ValueError:
            return cls.OTHER


class FetchOptions(BaseModel):
    """Caller options for result retrieval."""
    model_config = ConfigDict(frozen=True)

    format_json: bool = Field(True, description="Decode into typed records")
    page_size: Optional[int] = Field(None, ge=1, description="Rows per page; None disables pagination")
    next_token: Optional[str] = Field(None, description="Continuation token from the previous page")
    ignore_empty_lines: bool = Field(True, description="Skip blank lines in delimited text")
    flatten_nested_keys: bool = Field(False, description="Keep dotted headers as flat keys")

    @property
    def paginated(self) -> bool:
        return bool(self.page_size)


class Page(BaseModel):
    """One batch of records; next_token is None on the final page."""
    records: List[Any] = Field(default_factory=list)
    next_token: Optional[str] = None
    raw_response: Optional[Dict[str, Any]] = None


class QueryResult(BaseModel):
    """Results of a query run through the whole pipeline."""
    execution_id: str
    items: List[Any]
    count: int
    next_token: Optional[str] = None
    data_scanned_in_mb: Optional[float] = None
    query_cost_in_usd: Optional[float] = None
    engine_execution_time_ms: Optional[int] = None
    s3_location: Optional[str] = None
