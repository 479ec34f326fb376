"""Order email background tasks"""

from celery import Task
from celery.utils.log import get_task_logger
from typing import Dict, Any

from shopfront.core.celery_app import celery_app
from shopfront.core.config import settings

logger = get_task_logger(__name__)

class EmailTask(Task):
    """Base email task with retry logic"""
    autoretry_for = (Exception,)
    retry_kwargs = {"max_retries": 3}
    retry_backoff = True
    retry_backoff_max = 600
    retry_jitter = True

def _deliver(to_email: str, subject: str, body: str) -> Dict[str, Any]:
    # Mock transport: the message is logged instead of sent
    logger.info(f"Email from {settings.EMAIL_FROM_ADDRESS} to {to_email}: {subject}\n{body}")
    return {"success": True, "to": to_email, "subject": subject}

@celery_app.task(base=EmailTask, name="shopfront.tasks.email_tasks.send_order_confirmation_email")
def send_order_confirmation_email(to_email: str, order_data: Dict[str, Any]):
    """Send order confirmation email"""
    lines = [
        f"Thank you for your order {order_data['order_number']}.",
        "",
    ]
    for item in order_data.get("items", []):
        lines.append(f"{item['quantity']} x {item['product_name']} @ {item['unit_price']}")
    lines.extend([
        "",
        f"Subtotal: {order_data['subtotal']}",
        f"Shipping: {order_data['shipping_cost']}",
        f"Tax: {order_data['tax']}",
        f"Total: {order_data['total_amount']}",
    ])

    return _deliver(
        to_email,
        f"Order Confirmation - {order_data['order_number']}",
        "\n".join(lines)
    )

@celery_app.task(base=EmailTask, name="shopfront.tasks.email_tasks.send_order_status_email")
def send_order_status_email(to_email: str, order_data: Dict[str, Any]):
    """Send order status update email"""
    body = f"Your order {order_data['order_number']} is now {order_data['status']}."
    if order_data.get("previous_status"):
        body += f" It was previously {order_data['previous_status']}."
    if order_data.get("reason"):
        body += f"\nReason: {order_data['reason']}"

    return _deliver(
        to_email,
        f"Order Status Update - {order_data['order_number']}",
        body
    )
