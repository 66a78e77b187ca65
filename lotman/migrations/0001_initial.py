"""
Initial migration for Lotman models.
"""

import datetime

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Lotman models: catalog, lots, orders, picks, production runs."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50, unique=True, verbose_name='Code')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Customer',
                'verbose_name_plural': 'Customers',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=50, unique=True, verbose_name='SKU')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('unit_type', models.CharField(choices=[('CASE', 'Case'), ('LBS', 'Pounds'), ('EACH', 'Each')], default='CASE', max_length=10, verbose_name='Unit type')),
                ('standard_case_weight', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Standard case weight')),
                ('gtin', models.CharField(blank=True, default='', max_length=14, validators=[django.core.validators.RegexValidator(message='GTIN must have exactly 14 digits.', regex='^\\d{14}$')], verbose_name='GTIN')),
                ('default_origin_country', models.CharField(blank=True, default='', max_length=60, verbose_name='Default origin country')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='LotSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=50, unique=True, verbose_name='Key')),
                ('next_value', models.PositiveBigIntegerField(default=1, verbose_name='Next value')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Lot sequence',
                'verbose_name_plural': 'Lot sequences',
            },
        ),
        migrations.CreateModel(
            name='InventoryLot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lot_number', models.CharField(max_length=50, unique=True, verbose_name='Lot number')),
                ('original_quantity', models.PositiveIntegerField(verbose_name='Original quantity')),
                ('quantity_received', models.PositiveIntegerField(verbose_name='Quantity received')),
                ('quantity_current', models.PositiveIntegerField(verbose_name='Current quantity')),
                ('received_date', models.DateField(default=datetime.date.today, verbose_name='Received date')),
                ('expiry_date', models.DateField(db_index=True, verbose_name='Expiry date')),
                ('origin_country', models.CharField(max_length=60, verbose_name='Origin country')),
                ('grower_id', models.CharField(blank=True, default='', max_length=50, verbose_name='Grower ID')),
                ('status', models.CharField(choices=[('RECEIVED', 'Received'), ('QC_PENDING', 'QC pending'), ('AVAILABLE', 'Available'), ('DEPLETED', 'Depleted'), ('EXPIRED', 'Expired')], db_index=True, default='RECEIVED', max_length=20, verbose_name='Status')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent_lot', models.ForeignKey(blank=True, help_text='Source lot this lot was converted from.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='child_lots', to='lotman.inventorylot', verbose_name='Parent lot')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lots', to='lotman.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Inventory lot',
                'verbose_name_plural': 'Inventory lots',
                'ordering': ['expiry_date', 'created_at', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('po_number', models.CharField(blank=True, default='', max_length=50, verbose_name='PO number')),
                ('delivery_date', models.DateField(verbose_name='Delivery date')),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('CONFIRMED', 'Confirmed'), ('PICKING', 'Picking'), ('PARTIAL_PICK', 'Partially picked'), ('READY_TO_SHIP', 'Ready to ship'), ('SHIPPED', 'Shipped')], db_index=True, default='DRAFT', max_length=20, verbose_name='Status')),
                ('shipped_at', models.DateTimeField(blank=True, null=True, verbose_name='Shipped at')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='lotman.customer', verbose_name='Customer')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_ordered', models.PositiveIntegerField(verbose_name='Quantity ordered')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='lotman.order', verbose_name='Order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='lotman.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Order item',
                'verbose_name_plural': 'Order items',
                'ordering': ['pk'],
            },
        ),
        migrations.CreateModel(
            name='OrderAllocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_allocated', models.PositiveIntegerField(verbose_name='Quantity allocated')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('inventory_lot', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='allocations', to='lotman.inventorylot', verbose_name='Lot')),
                ('order_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='allocations', to='lotman.orderitem', verbose_name='Order item')),
            ],
            options={
                'verbose_name': 'Order allocation',
                'verbose_name_plural': 'Order allocations',
            },
        ),
        migrations.CreateModel(
            name='OrderPick',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_picked', models.PositiveIntegerField(verbose_name='Quantity picked')),
                ('picked_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Picked at')),
                ('inventory_lot', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='picks', to='lotman.inventorylot', verbose_name='Lot')),
                ('order_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='picks', to='lotman.orderitem', verbose_name='Order item')),
                ('picked_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Picked by')),
            ],
            options={
                'verbose_name': 'Order pick',
                'verbose_name_plural': 'Order picks',
                'ordering': ['picked_at', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='ProductionRun',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_consumed', models.DecimalField(decimal_places=6, max_digits=14, verbose_name='Quantity consumed')),
                ('quantity_produced', models.DecimalField(decimal_places=6, max_digits=14, verbose_name='Quantity produced')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('destination_lot', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='destination_runs', to='lotman.inventorylot', verbose_name='Destination lot')),
                ('source_lot', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='source_runs', to='lotman.inventorylot', verbose_name='Source lot')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Production run',
                'verbose_name_plural': 'Production runs',
                'ordering': ['created_at', 'pk'],
            },
        ),
        migrations.AddIndex(
            model_name='inventorylot',
            index=models.Index(fields=['product', 'status'], name='lotman_lot_product_status_idx'),
        ),
        migrations.AddIndex(
            model_name='inventorylot',
            index=models.Index(fields=['product', 'expiry_date'], name='lotman_lot_product_expiry_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['customer', 'status'], name='lotman_order_cust_status_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['delivery_date'], name='lotman_order_delivery_idx'),
        ),
        migrations.AddIndex(
            model_name='orderpick',
            index=models.Index(fields=['inventory_lot', 'picked_at'], name='lotman_pick_lot_picked_idx'),
        ),
    ]
