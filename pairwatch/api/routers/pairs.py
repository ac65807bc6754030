from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from pairwatch.api.deps import get_list_pairs_use_case, get_pair_use_case, get_select_pair_use_case
from pairwatch.api.routers.chart import chart_response
from pairwatch.api.schemas.chart import ChartResponse
from pairwatch.api.schemas.pairs import (
    PairDetailResponse,
    PairListResponse,
    PairRowResponse,
    TokenResponse,
)
from pairwatch.application.dto.chart import SelectPairInput
from pairwatch.application.dto.pairs import ListPairsInput, TokenOutput
from pairwatch.application.use_cases.get_pair import GetPairUseCase
from pairwatch.application.use_cases.list_pairs import ListPairsUseCase
from pairwatch.application.use_cases.pair_chart import SelectPairUseCase
from pairwatch.domain.exceptions import (
    ChartNotAvailableError,
    PairNotFoundError,
    RpcConnectionError,
)

router = APIRouter()


def _token_response(token: TokenOutput) -> TokenResponse:
    return TokenResponse(
        address=token.address,
        symbol=token.symbol,
        name=token.name,
        decimals=token.decimals,
    )


@router.get("/v1/pairs", response_model=PairListResponse)
def list_pairs(
    search: str | None = None,
    use_case: ListPairsUseCase = Depends(get_list_pairs_use_case),
):
    try:
        result = use_case.execute(ListPairsInput(search=search))
    except RpcConnectionError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return PairListResponse(
        search=result.search,
        total=result.total,
        message=result.message,
        data=[
            PairRowResponse(
                rank=row.rank,
                address=row.address,
                symbol_pair=row.symbol_pair,
                volume_badge=row.volume_badge,
                is_new=row.is_new,
                price=row.price,
                change_symbol=row.change_symbol,
                change_pct=row.change_pct,
                is_positive=row.is_positive,
            )
            for row in result.rows
        ],
    )


@router.get("/v1/pairs/{pair_address}", response_model=PairDetailResponse)
def get_pair(
    pair_address: str,
    use_case: GetPairUseCase = Depends(get_pair_use_case),
):
    try:
        result = use_case.execute(pair_address=pair_address)
    except PairNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return PairDetailResponse(
        address=result.address,
        symbol_pair=result.symbol_pair,
        token0=_token_response(result.token0),
        token1=_token_response(result.token1),
        reserve0=str(result.reserve0),
        reserve1=str(result.reserve1),
        block_timestamp_last=result.block_timestamp_last,
        price=result.price,
        volume_24h=result.volume_24h,
        price_change_pct=result.price_change_pct,
        last_update=result.last_update,
        created_at=result.created_at,
        is_new=result.is_new,
        is_selected=result.is_selected,
    )


@router.post("/v1/pairs/{pair_address}/select", response_model=ChartResponse)
def select_pair(
    pair_address: str,
    use_case: SelectPairUseCase = Depends(get_select_pair_use_case),
):
    try:
        result = use_case.execute(SelectPairInput(pair_address=pair_address))
    except PairNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ChartNotAvailableError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return chart_response(result)
