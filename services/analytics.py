"""
Sales Analytics Service

Aggregates committed orders into the figures shown on the sales screen:
totals, top sellers, hourly activity and order-type mix.
"""

import logging
from datetime import date, datetime, time, timedelta

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from enums.order_type import OrderType
from models.order import OrderDTO
from repositories.order import OrderRepository
from utils.money import round_money

logger = logging.getLogger(__name__)

NO_SALES = "No sales"


class SalesStatsDTO(BaseModel):
    total_revenue: float = 0.0
    total_profit: float = 0.0
    total_items_sold: int = 0
    total_orders: int = 0
    average_order_value: float = 0.0
    profit_margin: float = 0.0


class TopItemDTO(BaseModel):
    id: str
    name: str
    quantity: int
    revenue: float
    profit: float
    orders: int


class HourlyItemDTO(BaseModel):
    name: str
    quantity: int = 0
    revenue: float = 0.0


class HourlySalesDTO(BaseModel):
    hour: str  # "00:00" .. "23:00"
    order_count: int = 0
    revenue: float = 0.0
    profit: float = 0.0
    items: list[HourlyItemDTO] = []


class DailySalesStatsDTO(BaseModel):
    date: date
    stats: SalesStatsDTO
    hourly: list[HourlySalesDTO]
    top_items: list[TopItemDTO]
    order_type_breakdown: dict[str, int]


class WeeklySalesStatsDTO(BaseModel):
    week_start: date
    week_end: date
    daily: list[DailySalesStatsDTO]
    total_revenue: float = 0.0
    total_orders: int = 0
    # ISO dates, or NO_SALES when the week has no revenue
    best_day: str = NO_SALES
    worst_day: str = NO_SALES


class SalesAnalyticsService:

    @staticmethod
    def sales_stats(orders: list[OrderDTO]) -> SalesStatsDTO:
        """
        Headline numbers for a set of orders.

        Revenue is the order total (after discount); profit is the sum of line
        profits, where lines without cost data count their full price.
        """
        total_orders = len(orders)
        total_revenue = round_money(sum(order.total for order in orders))
        total_profit = round_money(sum(order.total_profit for order in orders))
        total_items = sum(order.item_count for order in orders)

        return SalesStatsDTO(
            total_revenue=total_revenue,
            total_profit=total_profit,
            total_items_sold=total_items,
            total_orders=total_orders,
            average_order_value=round_money(total_revenue / total_orders) if total_orders else 0.0,
            profit_margin=round_money(total_profit / total_revenue * 100) if total_revenue > 0 else 0.0
        )

    @staticmethod
    def top_selling_items(orders: list[OrderDTO], limit: int | None = None) -> list[TopItemDTO]:
        """Lines grouped by item or bundle id, most units sold first."""
        limit = limit or config.TOP_ITEMS_LIMIT
        stats: dict[str, dict] = {}
        for order in orders:
            for line in order.lines:
                key = line.item_id or line.bundle_id or line.name
                entry = stats.setdefault(key, {
                    "name": line.name, "quantity": 0, "revenue": 0.0, "profit": 0.0, "orders": set()
                })
                entry["quantity"] += line.quantity
                entry["revenue"] += line.subtotal
                entry["profit"] += line.profit
                entry["orders"].add(order.order_number)

        top = [
            TopItemDTO(
                id=key,
                name=entry["name"],
                quantity=entry["quantity"],
                revenue=round_money(entry["revenue"]),
                profit=round_money(entry["profit"]),
                orders=len(entry["orders"])
            )
            for key, entry in stats.items()
        ]
        top.sort(key=lambda item: (-item.quantity, -item.revenue, item.name))
        return top[:limit]

    @staticmethod
    def hourly_breakdown(orders: list[OrderDTO]) -> list[HourlySalesDTO]:
        """24 buckets keyed by order hour; items are grouped by line name within each hour."""
        buckets = [HourlySalesDTO(hour=f"{hour:02d}:00") for hour in range(24)]
        for order in orders:
            bucket = buckets[order.created_at.hour]
            bucket.order_count += 1
            bucket.revenue = round_money(bucket.revenue + order.total)
            bucket.profit = round_money(bucket.profit + order.total_profit)
            for line in order.lines:
                entry = next((item for item in bucket.items if item.name == line.name), None)
                if entry is None:
                    entry = HourlyItemDTO(name=line.name)
                    bucket.items.append(entry)
                entry.quantity += line.quantity
                entry.revenue = round_money(entry.revenue + line.subtotal)
        return buckets

    @staticmethod
    def order_type_breakdown(orders: list[OrderDTO]) -> dict[str, int]:
        breakdown = {order_type.value: 0 for order_type in OrderType}
        for order in orders:
            breakdown[order.order_type.value] += 1
        return breakdown

    @staticmethod
    def daily_stats(orders: list[OrderDTO], day: date) -> DailySalesStatsDTO:
        """Everything above for the orders created on one calendar day."""
        day_orders = [order for order in orders if order.created_at.date() == day]
        return DailySalesStatsDTO(
            date=day,
            stats=SalesAnalyticsService.sales_stats(day_orders),
            hourly=SalesAnalyticsService.hourly_breakdown(day_orders),
            top_items=SalesAnalyticsService.top_selling_items(day_orders),
            order_type_breakdown=SalesAnalyticsService.order_type_breakdown(day_orders)
        )

    @staticmethod
    def weekly_stats(orders: list[OrderDTO], week_start: date) -> WeeklySalesStatsDTO:
        """
        Seven daily summaries starting at week_start.

        best_day and worst_day are the ISO dates with the highest and lowest
        non-zero revenue; days without sales are never picked as worst day.
        """
        days = [week_start + timedelta(days=offset) for offset in range(7)]
        daily = [SalesAnalyticsService.daily_stats(orders, day) for day in days]
        selling_days = [day for day in daily if day.stats.total_revenue > 0]

        weekly = WeeklySalesStatsDTO(
            week_start=week_start,
            week_end=days[-1],
            daily=daily,
            total_revenue=round_money(sum(day.stats.total_revenue for day in daily)),
            total_orders=sum(day.stats.total_orders for day in daily)
        )
        if selling_days:
            weekly.best_day = max(selling_days, key=lambda day: day.stats.total_revenue).date.isoformat()
            weekly.worst_day = min(selling_days, key=lambda day: day.stats.total_revenue).date.isoformat()
        return weekly

    @staticmethod
    async def load_daily_stats(day: date, session: AsyncSession | Session) -> DailySalesStatsDTO:
        start = datetime.combine(day, time.min)
        orders = await OrderRepository.get_by_date_range(start, start + timedelta(days=1), session)
        logger.info(f"[Analytics] {len(orders)} orders loaded for {day.isoformat()}")
        return SalesAnalyticsService.daily_stats(orders, day)

    @staticmethod
    async def load_weekly_stats(week_start: date, session: AsyncSession | Session) -> WeeklySalesStatsDTO:
        start = datetime.combine(week_start, time.min)
        orders = await OrderRepository.get_by_date_range(start, start + timedelta(days=7), session)
        logger.info(f"[Analytics] {len(orders)} orders loaded for week of {week_start.isoformat()}")
        return SalesAnalyticsService.weekly_stats(orders, week_start)
