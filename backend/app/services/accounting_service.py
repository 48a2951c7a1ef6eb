"""
Accounting Service - Chart of Accounts and Transactions
"""
from typing import Optional, List, Tuple, Dict
from decimal import Decimal
from pydantic.alias_generators import to_camel
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import NotFoundError, ValidationError
from app.models import Account, Transaction, Customer, Supplier, TransactionStatus, TransactionType
from app.schemas import TransactionCreate, TransactionUpdate
from app.services import workflow
from app.services.base import CompanyScopedService


def fold_balance(transactions) -> Decimal:
    """DEBIT adds to the balance, CREDIT subtracts"""
    balance = Decimal("0.00")
    for txn in transactions:
        if txn.type == TransactionType.DEBIT.value:
            balance += txn.amount
        else:
            balance -= txn.amount
    return balance


class AccountService(CompanyScopedService):
    model = Account
    resource_name = "Account"
    search_fields = ("code", "name")
    default_take = 500

    def ordering(self) -> list:
        return [Account.type.asc(), Account.code.asc(), Account.id.asc()]

    def validate(self, values: dict, company_id: int, entity=None):
        parent_id = values.get("parent_id")
        if parent_id is None:
            return
        if entity is not None and parent_id == entity.id:
            raise ValidationError("an account cannot be its own parent", field="parentId")
        self.require(Account, parent_id, company_id, "Parent account")

    def get_balance(self, account_id: int, company_id: int) -> Decimal:
        account = self.get_by_id(account_id, company_id)
        return fold_balance(account.transactions)

    def get_balances(self, company_id: int) -> List[Dict]:
        """Running balance for every active account"""
        accounts = self.query(company_id).filter(Account.is_active == True).options(
            joinedload(Account.transactions)
        ).order_by(*self.ordering()).all()
        return [
            {"account": account, "type": account.type, "balance": fold_balance(account.transactions)}
            for account in accounts
        ]


class TransactionService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self, company_id: int):
        return self.db.query(Transaction).filter(Transaction.company_id == company_id)

    def get_by_id(self, transaction_id: int, company_id: int) -> Transaction:
        txn = self._query(company_id).options(
            joinedload(Transaction.account),
            joinedload(Transaction.customer),
            joinedload(Transaction.supplier)
        ).filter(Transaction.id == transaction_id).first()
        if not txn:
            raise NotFoundError("Transaction")
        return txn

    def list(self, company_id: int, q: Optional[str] = None, account_id: int = None, type: str = None,
             status: str = None, skip: int = 0, take: Optional[int] = None) -> Tuple[List[Transaction], int]:
        query = self._query(company_id)
        if account_id:
            query = query.filter(Transaction.account_id == account_id)
        if type:
            query = query.filter(Transaction.type == type)
        if status:
            query = query.filter(Transaction.status == status)
        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(Transaction.description.ilike(pattern), Transaction.reference.ilike(pattern)))

        total = query.count()
        items = query.options(
            joinedload(Transaction.account),
            joinedload(Transaction.customer),
            joinedload(Transaction.supplier)
        ).order_by(Transaction.created_at.desc(), Transaction.id.desc()).offset(skip).limit(take or 100).all()
        return items, total

    def _check_references(self, values: dict, company_id: int):
        references = (
            ("account_id", Account, "Account"),
            ("customer_id", Customer, "Customer"),
            ("supplier_id", Supplier, "Supplier"),
        )
        for key, model, name in references:
            ref_id = values.get(key)
            if ref_id is None:
                continue
            found = self.db.query(model.id).filter(model.id == ref_id, model.company_id == company_id).first()
            if not found:
                raise NotFoundError(name)

    def create(self, txn_data: TransactionCreate, company_id: int) -> Transaction:
        values = txn_data.model_dump()
        self._check_references(values, company_id)

        txn = Transaction(
            **values,
            status=TransactionStatus.PENDING.value,
            company_id=company_id
        )
        self.db.add(txn)
        self.db.flush()
        return txn

    def update(self, transaction_id: int, company_id: int, txn_data: TransactionUpdate) -> Transaction:
        txn = self.get_by_id(transaction_id, company_id)
        workflow.ensure_editable(txn, workflow.TRANSACTION)

        update_data = txn_data.model_dump(exclude_unset=True)
        for key in ("date", "description", "amount", "type", "account_id"):
            if key in update_data and update_data[key] is None:
                raise ValidationError("must not be null", field=to_camel(key))
        self._check_references(update_data, company_id)

        for key, value in update_data.items():
            setattr(txn, key, value)

        self.db.flush()
        return txn

    def approve(self, transaction_id: int, company_id: int) -> Transaction:
        txn = self.get_by_id(transaction_id, company_id)
        workflow.transition(txn, workflow.TRANSACTION, TransactionStatus.APPROVED.value)
        self.db.flush()
        return txn

    def delete(self, transaction_id: int, company_id: int):
        txn = self.get_by_id(transaction_id, company_id)
        self.db.delete(txn)
        self.db.flush()
