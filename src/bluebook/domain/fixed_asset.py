"""Fixed asset domain service."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional

from bluebook.database.base import Database
from bluebook.domain.depreciation import depreciation_rate, validate_fixed_asset
from bluebook.domain.entities import (
    AssetCategory,
    AssetStatus,
    DepreciationMethod,
    FixedAsset as FixedAssetEntity,
)
from bluebook.domain.errors import NotFoundError, ValidationError, fixed_asset_not_found


class FixedAssetService:
    """Service for the fixed asset register."""

    def __init__(self, db: Database):
        """Initialize fixed asset service.

        Args:
            db: Database instance
        """
        self.db = db

    def register_asset(
        self,
        name: str,
        category: AssetCategory,
        acquisition_date: date,
        acquisition_cost: int,
        useful_life: int,
        depreciation_method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE,
        depreciation_rate_value: Optional[Decimal] = None,
        business_ratio: int = 100,
        memo: Optional[str] = None,
    ) -> int:
        """Register an asset in service.

        Args:
            name: Asset name
            category: Asset category
            acquisition_date: Date the asset was put into service
            acquisition_cost: Cost in yen
            useful_life: Statutory useful life in years
            depreciation_method: Straight-line or declining balance
            depreciation_rate_value: Rate override; the statutory table rate when None
            business_ratio: Business-use percentage (0-100)
            memo: Optional memo

        Returns:
            Asset ID

        Raises:
            ValidationError: If any field is invalid
        """
        asset = FixedAssetEntity(
            id=0,
            name=name.strip(),
            category=AssetCategory(category),
            acquisition_date=acquisition_date,
            acquisition_cost=acquisition_cost,
            useful_life=useful_life,
            depreciation_method=DepreciationMethod(depreciation_method),
            depreciation_rate=depreciation_rate_value,
            business_ratio=business_ratio,
            memo=memo,
        )
        errors = validate_fixed_asset(asset)
        if errors:
            raise ValidationError("; ".join(errors))

        if asset.depreciation_rate is None:
            asset = replace(
                asset, depreciation_rate=depreciation_rate(asset.depreciation_method, useful_life)
            )
        return self.db.create_fixed_asset(asset)

    def get_asset(self, asset_id: int) -> Optional[FixedAssetEntity]:
        """Get fixed asset by ID."""
        return self.db.get_fixed_asset(asset_id)

    def list_assets(self, include_retired: bool = True) -> list[FixedAssetEntity]:
        """List assets ordered by acquisition date.

        Args:
            include_retired: Whether sold and disposed assets are included
        """
        assets = self.db.list_fixed_assets()
        if not include_retired:
            assets = [asset for asset in assets if asset.status == AssetStatus.ACTIVE]
        return assets

    def dispose_asset(
        self, asset_id: int, disposal_date: date, status: AssetStatus = AssetStatus.DISPOSED
    ) -> None:
        """Mark an asset as sold or disposed.

        Raises:
            NotFoundError: If the asset does not exist
            ValidationError: If the status is active or the date precedes acquisition
        """
        asset = self.db.get_fixed_asset(asset_id)
        if asset is None:
            raise NotFoundError(fixed_asset_not_found(asset_id))
        if AssetStatus(status) == AssetStatus.ACTIVE:
            raise ValidationError("Disposal status must be 'sold' or 'disposed'")

        updated = replace(asset, status=AssetStatus(status), disposal_date=disposal_date)
        errors = validate_fixed_asset(updated)
        if errors:
            raise ValidationError("; ".join(errors))
        self.db.update_fixed_asset(updated)
