# drkleen/services/dashboard.py
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional
import logging

from drkleen.utils.token import parse_timestamp, utcnow

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10
TREND_MONTHS = 6


def _created(row: Dict[str, Any]) -> Optional[datetime]:
    try:
        return parse_timestamp(row.get("created_at"))
    except ValueError:
        return None


def _count(rows: Iterable[Dict[str, Any]], field: str, value: Any) -> int:
    return sum(1 for r in rows if r.get(field) == value)


def _since(rows: Iterable[Dict[str, Any]], start: datetime) -> int:
    return sum(1 for r in rows if (_created(r) or datetime.min.replace(tzinfo=start.tzinfo)) >= start)


def _month_start(year: int, month: int, tzinfo) -> datetime:
    # month may run below 1 when stepping back across a year boundary
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=tzinfo)


def monthly_trends(rows: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Row counts per calendar month for the last six months, oldest first."""
    now = now or utcnow()
    months = []
    for back in range(TREND_MONTHS - 1, -1, -1):
        start = _month_start(now.year, now.month - back, now.tzinfo)
        end = _month_start(now.year, now.month - back + 1, now.tzinfo)
        count = sum(1 for r in rows if (c := _created(r)) is not None and start <= c < end)
        months.append({"month": start.strftime("%b %Y"), "count": count})
    return months


def recent_activity(bookings: List[Dict[str, Any]], inquiries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    activity = []
    for booking in bookings[:5]:
        activity.append({
            "type": "booking",
            "title": f"New booking from {booking.get('customer_name')}",
            "description": booking.get("service_type"),
            "date": booking.get("created_at"),
            "status": booking.get("status"),
        })
    for inquiry in inquiries[:5]:
        activity.append({
            "type": "inquiry",
            "title": f"Inquiry from {inquiry.get('name')}",
            "description": inquiry.get("inquiry_type"),
            "date": inquiry.get("created_at"),
            "status": inquiry.get("status"),
        })
    oldest = datetime.min.isoformat()
    activity.sort(key=lambda a: str(a["date"] or oldest), reverse=True)
    return activity[:RECENT_ACTIVITY_LIMIT]


def build_overview(tables: Dict[str, List[Dict[str, Any]]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Aggregate the back-office dashboard from full table snapshots.
    Missing tables count as empty.
    """
    now = now or utcnow()
    bookings = tables.get("bookings", [])
    products = tables.get("products", [])
    testimonials = tables.get("testimonials", [])
    inquiries = tables.get("contact_inquiries", [])
    services = tables.get("services", [])
    service_requests = tables.get("service_requests", [])

    seven_days_ago = now - timedelta(days=7)
    thirty_days_ago = now - timedelta(days=30)

    ratings = [float(t.get("rating") or 0) for t in testimonials]

    stats = {
        "totalBookings": len(bookings),
        "totalProducts": len(products),
        "totalTestimonials": len(testimonials),
        "totalServices": len(services),
        "pendingBookings": _count(bookings, "status", "pending"),
        "completedBookings": _count(bookings, "status", "completed"),
        "recentBookings": _since(bookings, seven_days_ago),
        "lowStockProducts": sum(1 for p in products if p.get("stock") and p["stock"] <= 5),
        "outOfStockProducts": _count(products, "stock", 0),
        "totalProductValue": sum(float(p.get("price") or 0) * (p.get("stock") or 0) for p in products),
        "totalInquiries": len(inquiries),
        "newInquiries": _count(inquiries, "status", "new"),
        "resolvedInquiries": _count(inquiries, "status", "resolved"),
        "highPriorityInquiries": _count(inquiries, "priority", "high"),
        "recentInquiries": _since(inquiries, seven_days_ago),
        "totalServiceRequests": len(service_requests),
        "pendingServiceRequests": _count(service_requests, "status", "pending"),
        "completedServiceRequests": _count(service_requests, "status", "completed"),
        "recentServiceRequests": _since(service_requests, seven_days_ago),
        "averageRating": round(sum(ratings) / len(ratings), 1) if ratings else 0,
        "recentTestimonials": _since(testimonials, thirty_days_ago),
    }

    return {
        "stats": stats,
        "recentActivity": recent_activity(bookings, inquiries),
        "chartData": {
            "bookingsByStatus": {
                "pending": stats["pendingBookings"],
                "completed": stats["completedBookings"],
                "cancelled": _count(bookings, "status", "cancelled"),
            },
            "inquiriesByPriority": {
                "high": stats["highPriorityInquiries"],
                "medium": _count(inquiries, "priority", "medium"),
                "low": _count(inquiries, "priority", "low"),
            },
            "monthlyTrends": {
                "bookings": monthly_trends(bookings, now),
                "inquiries": monthly_trends(inquiries, now),
                "serviceRequests": monthly_trends(service_requests, now),
            },
        },
    }
