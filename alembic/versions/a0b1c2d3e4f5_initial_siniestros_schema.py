"""initial_siniestros_schema

Revision ID: a0b1c2d3e4f5
Revises:
Create Date: 2026-10-19 09:00:00.000000

Esquema inicial del ajuste de reserva:
1. Seguridad: roles, users, refresh_tokens
2. Siniestro: siniestros, certificados_siniestro, clientes, siniestros_acp
3. Póliza: polizas, riesgos_cubiertos, riesgos_cubiertos_historicos
4. Catálogos: ramos_contables, coberturas, productos_coberturas, coberturas_luc,
   causas_coberturas, ramos_componentes, catalogo_general, codigos_referencia
5. Reservas y movimientos: reservas_coberturas, ajustes_remesa,
   movimientos_siniestro, movimientos_coberturas, movimientos_contables,
   liquidaciones_coberturas
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a0b1c2d3e4f5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name: str, nullable: bool = False, default: bool = False) -> sa.Column:
    """Columna de monto Numeric(18, 2) (Money column)."""
    return sa.Column(
        name,
        sa.Numeric(18, 2),
        nullable=nullable,
        server_default=sa.text('0') if default else None,
    )


def upgrade() -> None:
    # ── 1. Seguridad ──
    op.create_table(
        'roles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('level', sa.Integer(), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('role_id', sa.Uuid(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('username', sa.String(30), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(512), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ── 2. Siniestro ──
    op.create_table(
        'siniestros',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('numero', sa.BigInteger(), primary_key=True),
        sa.Column('ramo', sa.Integer(), nullable=False),
        sa.Column('fe_ocurrencia', sa.Date(), nullable=False),
        sa.Column('st_siniestro', sa.Integer(), nullable=False),
        sa.Column('nacionalidad', sa.String(1), nullable=True),
        sa.Column('cedula', sa.BigInteger(), nullable=True),
        sa.Column('cd_causa', sa.String(10), nullable=True),
    )
    op.create_table(
        'certificados_siniestro',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('siniestro', sa.BigInteger(), primary_key=True),
        sa.Column('sucursal_poliza', sa.Integer(), nullable=False),
        sa.Column('ramo_poliza', sa.Integer(), nullable=False),
        sa.Column('poliza', sa.BigInteger(), nullable=False),
        sa.Column('certificado', sa.Integer(), nullable=False),
        sa.Column('beneficiario', sa.String(120), nullable=True),
    )
    op.create_table(
        'clientes',
        sa.Column('nacionalidad', sa.String(1), primary_key=True),
        sa.Column('cedula', sa.BigInteger(), primary_key=True),
        sa.Column('nombre', sa.String(60), nullable=False),
        sa.Column('apellido', sa.String(60), nullable=True),
    )
    op.create_table(
        'siniestros_acp',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('siniestro', sa.BigInteger(), primary_key=True),
        sa.Column('nu_dias_parcial', sa.Integer(), nullable=False),
    )

    # ── 3. Póliza ──
    op.create_table(
        'polizas',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('ramo', sa.Integer(), primary_key=True),
        sa.Column('numero', sa.BigInteger(), primary_key=True),
        sa.Column('cd_moneda', sa.String(2), nullable=True),
    )
    for table, index in (
        ('riesgos_cubiertos', 'ix_riesgos_cubiertos_certificado'),
        ('riesgos_cubiertos_historicos', 'ix_riesgos_cubiertos_hist_certificado'),
    ):
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('sucursal', sa.Integer(), nullable=False),
            sa.Column('ramo', sa.Integer(), nullable=False),
            sa.Column('poliza', sa.BigInteger(), nullable=False),
            sa.Column('certificado', sa.Integer(), nullable=False),
            sa.Column('ramo_contable', sa.Integer(), nullable=False),
            sa.Column('cobertura', sa.String(3), nullable=False),
            sa.Column('fe_efectiva', sa.Date(), nullable=False),
            _money('mt_suma_asegurada'),
            sa.Column('cd_plan', sa.String(10), nullable=True),
        )
        op.create_index(index, table, ['sucursal', 'ramo', 'poliza', 'certificado'])

    # ── 4. Catálogos ──
    op.create_table(
        'ramos_contables',
        sa.Column('codigo', sa.Integer(), primary_key=True),
        sa.Column('descripcion', sa.String(60), nullable=False),
    )
    op.create_table(
        'coberturas',
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('codigo', sa.String(3), primary_key=True),
        sa.Column('descripcion', sa.String(60), nullable=False),
        sa.Column('in_valida_monto_sin', sa.String(1), nullable=False, server_default='N'),
    )
    op.create_table(
        'productos_coberturas',
        sa.Column('ramo', sa.Integer(), primary_key=True),
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('cobertura', sa.String(3), primary_key=True),
        sa.Column('tipo_producto', sa.String(3), nullable=True),
        sa.Column('tipo_siniestro', sa.String(2), nullable=True),
    )
    op.create_table(
        'coberturas_luc',
        sa.Column('ramo', sa.Integer(), primary_key=True),
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('cobertura', sa.String(3), primary_key=True),
        sa.Column('prioridad', sa.Integer(), nullable=False),
    )
    op.create_table(
        'causas_coberturas',
        sa.Column('ramo', sa.Integer(), primary_key=True),
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('cobertura', sa.String(3), primary_key=True),
        sa.Column('cd_causa', sa.String(10), primary_key=True),
    )
    op.create_table(
        'ramos_componentes',
        sa.Column('ramo', sa.Integer(), primary_key=True),
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('tp_movimiento', sa.String(2), primary_key=True),
        sa.Column('tipo_siniestro', sa.String(2), primary_key=True),
        sa.Column('componente', sa.String(10), primary_key=True),
        sa.Column('codificacion', sa.String(1), nullable=False),
        sa.Column('cuenta_contable', sa.String(30), nullable=True),
    )
    op.create_table(
        'catalogo_general',
        sa.Column('codigo', sa.Integer(), primary_key=True),
        sa.Column('nom_concepto', sa.String(100), nullable=False),
    )
    op.create_table(
        'codigos_referencia',
        sa.Column('dominio', sa.String(20), primary_key=True),
        sa.Column('valor', sa.String(20), primary_key=True),
        sa.Column('descripcion', sa.String(100), nullable=False),
    )

    # ── 5. Reservas y movimientos ──
    op.create_table(
        'reservas_coberturas',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('siniestro', sa.BigInteger(), primary_key=True),
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('cobertura', sa.String(3), primary_key=True),
        sa.Column('sucursal_poliza', sa.Integer(), nullable=False),
        sa.Column('ramo_poliza', sa.Integer(), nullable=False),
        sa.Column('poliza', sa.BigInteger(), nullable=False),
        sa.Column('certificado', sa.Integer(), nullable=False),
        _money('mt_suma_asegurada', nullable=True),
        _money('mt_reserva', default=True),
        _money('mt_ajustado', default=True),
        _money('mt_liquidado', default=True),
        sa.Column('fe_efectiva', sa.Date(), nullable=True),
    )
    op.create_index(
        'ix_reservas_coberturas_poliza', 'reservas_coberturas',
        ['sucursal_poliza', 'ramo_poliza', 'poliza', 'certificado'],
    )
    op.create_table(
        'ajustes_remesa',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('id_remesa', sa.Integer(), nullable=False),
        sa.Column('sucursal', sa.Integer(), nullable=False),
        sa.Column('ramo', sa.Integer(), nullable=False),
        sa.Column('poliza', sa.BigInteger(), nullable=False),
        sa.Column('certificado', sa.Integer(), nullable=False),
        sa.Column('fe_ocurrencia', sa.Date(), nullable=False),
        sa.Column('prioridad', sa.Integer(), nullable=False),
        sa.Column('ramo_contable', sa.Integer(), nullable=False),
        sa.Column('cobertura', sa.String(3), nullable=False),
        _money('mt_ajuste'),
        sa.Column('msj_val', sa.String(10), nullable=False, server_default='ST1'),
        sa.Column('observacion', sa.String(200), nullable=False, server_default='OK'),
        sa.Column('registro', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_ajustes_remesa_id_remesa', 'ajustes_remesa', ['id_remesa'])
    op.create_table(
        'movimientos_siniestro',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('siniestro', sa.BigInteger(), primary_key=True),
        sa.Column('nu_movimiento', sa.Integer(), primary_key=True),
        sa.Column('fe_movimiento', sa.Date(), nullable=False),
        sa.Column('tp_movimiento', sa.String(2), nullable=False),
        sa.Column('analista', sa.String(30), nullable=False),
        _money('mt_movimiento'),
        sa.Column('cd_moneda', sa.String(2), nullable=False),
        sa.Column('ramo_contable', sa.Integer(), nullable=False),
        sa.Column('cobertura', sa.String(3), nullable=False),
        sa.Column('aviso_aceptado', sa.String(2), nullable=True),
    )
    op.create_table(
        'movimientos_coberturas',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('siniestro', sa.BigInteger(), primary_key=True),
        sa.Column('nu_movimiento', sa.Integer(), primary_key=True),
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('cobertura', sa.String(3), primary_key=True),
        sa.Column('sucursal_poliza', sa.Integer(), nullable=False),
        sa.Column('ramo_poliza', sa.Integer(), nullable=False),
        sa.Column('poliza', sa.BigInteger(), nullable=False),
        sa.Column('certificado', sa.Integer(), nullable=False),
        sa.Column('tp_movimiento', sa.String(2), nullable=False),
        sa.Column('fe_movimiento', sa.Date(), nullable=False),
        _money('mt_movimiento'),
        sa.Column('cd_moneda', sa.String(2), nullable=False),
    )
    op.create_table(
        'movimientos_contables',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('siniestro', sa.BigInteger(), primary_key=True),
        sa.Column('nu_asiento', sa.Integer(), primary_key=True),
        sa.Column('nu_movtocon', sa.Integer(), primary_key=True),
        sa.Column('nu_movimiento', sa.Integer(), nullable=False),
        sa.Column('tp_movimiento', sa.String(2), nullable=False),
        sa.Column('fe_movimiento', sa.Date(), nullable=False),
        sa.Column('compania', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('ramo_poliza', sa.Integer(), nullable=False),
        sa.Column('poliza', sa.BigInteger(), nullable=False),
        sa.Column('certificado', sa.Integer(), nullable=False),
        sa.Column('ramo_contable', sa.Integer(), nullable=False),
        sa.Column('cobertura', sa.String(3), nullable=False),
        sa.Column('tipo_siniestro', sa.String(2), nullable=False),
        sa.Column('componente', sa.String(10), nullable=False),
        sa.Column('cuenta_contable', sa.String(30), nullable=True),
        _money('mt_debe', default=True),
        _money('mt_haber', default=True),
        sa.Column('nu_documento', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('st_contable', sa.String(1), nullable=False, server_default='N'),
        sa.Column('fe_contable', sa.Date(), nullable=True),
    )
    op.create_table(
        'liquidaciones_coberturas',
        sa.Column('sucursal', sa.Integer(), primary_key=True),
        sa.Column('siniestro', sa.BigInteger(), primary_key=True),
        sa.Column('nu_liquidacion', sa.Integer(), primary_key=True),
        sa.Column('ramo_contable', sa.Integer(), primary_key=True),
        sa.Column('cobertura', sa.String(3), primary_key=True),
        sa.Column('cd_egreso', sa.Integer(), nullable=False),
        sa.Column('fe_pago', sa.Date(), nullable=True),
        sa.Column('tp_pago', sa.String(1), nullable=True),
        sa.Column('st_liquidacion', sa.Integer(), nullable=False),
        _money('mt_liquidacion'),
        _money('mt_deducible', default=True),
        sa.Column('tp_deducible', sa.Integer(), nullable=True),
    )


def downgrade() -> None:
    for table in (
        'liquidaciones_coberturas', 'movimientos_contables', 'movimientos_coberturas',
        'movimientos_siniestro', 'ajustes_remesa', 'reservas_coberturas',
        'codigos_referencia', 'catalogo_general', 'ramos_componentes', 'causas_coberturas',
        'coberturas_luc', 'productos_coberturas', 'coberturas', 'ramos_contables',
        'riesgos_cubiertos_historicos', 'riesgos_cubiertos', 'polizas',
        'siniestros_acp', 'clientes', 'certificados_siniestro', 'siniestros',
        'refresh_tokens', 'users', 'roles',
    ):
        op.drop_table(table)
