from pydantic import BaseModel

class DebugResult(BaseModel):
    """Fields every debug operation reports."""
    message: str
    timestamp: str

class SlowResult(DebugResult):
    delay_ms: int

class CpuResult(DebugResult):
    fibonacci_n: int
    result: int
    duration_ms: int

class DbHeavyResult(DebugResult):
    queries_executed: int
    total_rows: int
    duration_ms: int
