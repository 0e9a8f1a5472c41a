from fastapi import APIRouter, Depends

from price_analyzer.api.dependencies import (
    get_check_connection_use_case,
    get_process_command_use_case,
)
from price_analyzer.api.schemas.assistant import (
    CommandRequest,
    CommandResponse,
    ConnectionTestResponse,
)
from price_analyzer.application.use_cases.check_llm_connection import CheckLLMConnection
from price_analyzer.application.use_cases.process_command import (
    ProcessCommand,
    ProcessCommandInput,
)

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/commands", response_model=CommandResponse)
async def process_command(
    body: CommandRequest,
    use_case: ProcessCommand = Depends(get_process_command_use_case),
) -> CommandResponse:
    """Run a natural-language command such as "найди цену на iPhone 15 у конкурентов"."""
    result = await use_case.execute(ProcessCommandInput(text=body.text))
    return CommandResponse.model_validate(result)


@router.post("/connection-test", response_model=ConnectionTestResponse)
async def connection_test(
    use_case: CheckLLMConnection = Depends(get_check_connection_use_case),
) -> ConnectionTestResponse:
    return ConnectionTestResponse.model_validate(await use_case.execute())
