"""
Accounting API Routes - Chart of Accounts, Transactions
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import Pagination
from app.core.database import get_db
from app.core.security import get_current_user, CurrentUser
from app.models import TransactionStatus, TransactionType
from app.schemas import (
    Page, SuccessResponse,
    AccountCreate, AccountUpdate, AccountResponse,
    TransactionCreate, TransactionUpdate, TransactionResponse
)
from app.services.accounting_service import AccountService, TransactionService

router = APIRouter(tags=["Accounting"])


# ==================== ACCOUNTS ====================

@router.get("/accounts", response_model=Page[AccountResponse])
async def list_accounts(
    q: Optional[str] = None,
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Chart of accounts ordered by type then code"""
    items, total = AccountService(db).list(current_user.company_id, q, page.skip, page.take)
    return {"items": items, "total": total}


@router.get("/accounts/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return AccountService(db).get_by_id(account_id, current_user.company_id)


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    account_data: AccountCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new account"""
    account = AccountService(db).create(account_data, current_user.company_id)
    db.commit()
    return account


@router.put("/accounts/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: int,
    account_data: AccountUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update account"""
    account = AccountService(db).update(account_id, current_user.company_id, account_data)
    db.commit()
    return account


@router.delete("/accounts/{account_id}", response_model=SuccessResponse)
async def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Deactivate account"""
    AccountService(db).delete(account_id, current_user.company_id)
    db.commit()
    return {"success": True}


# ==================== TRANSACTIONS ====================

@router.get("/transactions", response_model=Page[TransactionResponse])
async def list_transactions(
    q: Optional[str] = None,
    account_id: Optional[int] = Query(None, alias="accountId"),
    type_filter: Optional[TransactionType] = Query(None, alias="type"),
    status_filter: Optional[TransactionStatus] = Query(None, alias="status"),
    page: Pagination = Depends(),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    items, total = TransactionService(db).list(
        current_user.company_id,
        q=q,
        account_id=account_id,
        type=type_filter.value if type_filter else None,
        status=status_filter.value if status_filter else None,
        skip=page.skip,
        take=page.take
    )
    return {"items": items, "total": total}


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return TransactionService(db).get_by_id(transaction_id, current_user.company_id)


@router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    txn_data: TransactionCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Record a pending transaction against an account"""
    transaction_service = TransactionService(db)
    txn = transaction_service.create(txn_data, current_user.company_id)
    db.commit()
    return transaction_service.get_by_id(txn.id, current_user.company_id)


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    txn_data: TransactionUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    txn = TransactionService(db).update(transaction_id, current_user.company_id, txn_data)
    db.commit()
    return txn


@router.post("/transactions/{transaction_id}/approve", response_model=TransactionResponse)
async def approve_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    txn = TransactionService(db).approve(transaction_id, current_user.company_id)
    db.commit()
    return txn


@router.delete("/transactions/{transaction_id}", response_model=SuccessResponse)
async def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    TransactionService(db).delete(transaction_id, current_user.company_id)
    db.commit()
    return {"success": True}
