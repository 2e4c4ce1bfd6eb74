import random
from datetime import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction as db_transaction
from django.utils import timezone  # 시간대 처리를 위해 추가

from apps.transactions.models import Transaction, TYPE_INCOME, TYPE_EXPENSE

User = get_user_model()

# (카테고리, 최소 금액, 최대 금액) - 단위 달러
INCOME_CATEGORIES = [
    ('Salary', 2000, 4000),
    ('Freelance', 100, 800),
    ('Interest', 1, 50),
]
EXPENSE_CATEGORIES = [
    ('Food', 5, 80),
    ('Rent', 800, 1500),
    ('Transport', 2, 60),
    ('Utilities', 30, 200),
    ('Entertainment', 10, 150),
    (None, 1, 100),  # 카테고리 없는 거래
]


def _months_back(today, count):
    """이번 달부터 거슬러 올라간 (연, 월) 목록, 오래된 달부터"""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


class Command(BaseCommand):
    help = '최근 N개월 샘플 거래 데이터 생성'

    def add_arguments(self, parser):
        parser.add_argument('--username', type=str, default='testuser', help='사용자명')
        parser.add_argument('--months', type=int, default=6, help='생성할 개월 수 (이번 달 포함)')
        parser.add_argument('--per-month', type=int, default=30, help='월별 거래 건수')
        parser.add_argument('--clear', action='store_true', help='해당 사용자의 기존 거래 삭제 후 생성')

    @db_transaction.atomic
    def handle(self, *args, **options):
        username = options['username']
        months = options['months']
        per_month = options['per_month']

        self.stdout.write("=== 샘플 거래 생성 시작 ===")

        # 1. 사용자
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'email': f'{username}@example.com'}
        )
        if created:
            user.set_password('test1234')
            user.save()
            self.stdout.write(f"사용자 생성: {username} (비밀번호: test1234)")

        # 2. 기존 데이터 정리
        if options['clear']:
            deleted, _ = Transaction.objects.filter(user=user).delete()
            self.stdout.write(self.style.WARNING(f"기존 거래 {deleted}건 삭제"))

        # 3. 거래 생성
        today = timezone.localdate()
        transactions_to_create = []

        for year, month in _months_back(today, months):
            # 이번 달은 오늘까지만
            last_day = today.day if (year, month) == (today.year, today.month) else 28
            for _ in range(per_month):
                if random.random() < 0.2:
                    tx_type = TYPE_INCOME
                    category, low, high = random.choice(INCOME_CATEGORIES)
                else:
                    tx_type = TYPE_EXPENSE
                    category, low, high = random.choice(EXPENSE_CATEGORIES)

                amount = Decimal(random.randint(low * 100, high * 100)) / 100
                naive_datetime = datetime(year, month, random.randint(1, last_day), random.randint(8, 21), random.randint(0, 59))

                transactions_to_create.append(
                    Transaction(
                        user=user,
                        type=tx_type,
                        category=category,
                        amount=amount,
                        description=f'{category or "Misc"} - {year}.{month:02d}',
                        date=timezone.make_aware(naive_datetime),
                    )
                )

        Transaction.objects.bulk_create(transactions_to_create, batch_size=500)

        self.stdout.write(self.style.SUCCESS(
            f"✅ {len(transactions_to_create)}건 생성 완료 ({username}, {months}개월)"
        ))
