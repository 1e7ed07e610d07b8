import re
from decimal import Decimal
from typing import Dict, List

LINE_BREAKS = re.compile(r'\\r\\n|\\n|\r\n|\r')


def normalize_line_breaks(text: str) -> str:
    """
    Remarks and recipes arrive with real or escaped CR/LF sequences, the chat wants plain \\n
    """
    return LINE_BREAKS.sub('\n', text or '')


def format_yen(amount) -> str:
    return f'¥{int(Decimal(str(amount))):,}'


def get_order_line_text(line: Dict) -> str:
    text = f"• {line.get('name_')} x{line.get('quantity')} ({format_yen(line.get('subtotal', 0))})"
    if (line.get('blend_name') or '').strip():
        text += f"\n  Blend: {line['blend_name']}"
    if (line.get('recipe') or '').strip():
        text += f"\n  Recipe: {normalize_line_breaks(line['recipe'])}"
    if (line.get('remarks') or '').strip():
        text += f"\n  Remarks: {normalize_line_breaks(line['remarks'])}"
    return text


def get_new_order_notification_message(order_record: Dict) -> Dict:
    lines: List[Dict] = order_record.get('items') or []
    items_text = '\n'.join(get_order_line_text(line) for line in lines)
    return {
        'text': f"New order from {order_record.get('patron_name')}",
        'blocks': [
            {'type': 'header', 'text': {'type': 'plain_text', 'text': 'New order'}},
            {'type': 'section', 'fields': [
                {'type': 'mrkdwn', 'text': f"*Patron:*\n{order_record.get('patron_name')}"}
            ]},
            {'type': 'section', 'text': {'type': 'mrkdwn', 'text': f'*Items:*\n{items_text}'}},
            {'type': 'section', 'text': {
                'type': 'mrkdwn', 'text': f"*Total: {format_yen(order_record.get('total', 0))}*"
            }}
        ]
    }
