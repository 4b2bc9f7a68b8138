"""esquema_inicial_clinica

Crea las tablas del expediente quirúrgico: usuario, medico, paciente,
procedimiento (con sus secciones JSON y el sello ``version``) y
foto_procedimiento.

Revision ID: 3c7d1e5a9b20
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c7d1e5a9b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_SECCIONES = (
    'resumen_ingreso',
    'nota_preanestesica',
    'consentimiento',
    'nota_postanestesica',
    'nota_postoperatoria',
    'indicaciones_postop',
    'nota_alta',
)


def upgrade() -> None:
    op.create_table(
        'usuario',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('login', sa.String(100), nullable=False, unique=True),
        sa.Column('email', sa.String(200), nullable=True),
        sa.Column('password_hash', sa.String(200), nullable=False),
        sa.Column('nombre', sa.String(150), nullable=False),
        sa.Column('apellido', sa.String(150), nullable=False, server_default=''),
        sa.Column('telefono', sa.String(50), nullable=True),
        sa.Column('rol', sa.String(30), nullable=False),
        sa.Column('id_hospital', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('activo', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('ultimo_acceso', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'medico',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('usuario_id', sa.Integer(), sa.ForeignKey('usuario.id'), nullable=False, unique=True),
        sa.Column('cedula', sa.String(50), nullable=True),
        sa.Column('especialidad', sa.String(150), nullable=True),
    )

    op.create_table(
        'paciente',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('id_hospital', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('nombre', sa.String(150), nullable=False),
        sa.Column('apellido', sa.String(150), nullable=False),
        sa.Column('fecha_nacimiento', sa.Date(), nullable=True),
        sa.Column('sexo', sa.String(1), nullable=True),
        sa.Column('rfc', sa.String(20), nullable=True),
        sa.Column('telefono', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'procedimiento',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('id_hospital', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('paciente_id', sa.Integer(), sa.ForeignKey('paciente.id'), nullable=False),
        sa.Column('medico_id', sa.Integer(), sa.ForeignKey('usuario.id'), nullable=False),
        sa.Column('anestesiologo_id', sa.Integer(), sa.ForeignKey('usuario.id'), nullable=True),
        sa.Column('ayudante_id', sa.Integer(), sa.ForeignKey('usuario.id'), nullable=True),
        sa.Column('fecha_qx', sa.Date(), nullable=False),
        sa.Column('diagnostico', sa.String(500), nullable=False, server_default=''),
        sa.Column('qx_planeada', sa.String(500), nullable=False, server_default=''),
        sa.Column('status', sa.String(20), nullable=False, server_default='Programado'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *[sa.Column(seccion, sa.JSON(), nullable=True) for seccion in _SECCIONES],
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_procedimiento_fecha_qx', 'procedimiento', ['fecha_qx'])

    op.create_table(
        'foto_procedimiento',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('procedimiento_id', sa.Integer(), sa.ForeignKey('procedimiento.id'), nullable=False),
        sa.Column('ruta', sa.String(500), nullable=False),
        sa.Column('nombre_original', sa.String(300), nullable=True),
        sa.Column('content_type', sa.String(100), nullable=True),
        sa.Column('descripcion', sa.String(1000), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        'ix_foto_procedimiento_procedimiento_id',
        'foto_procedimiento',
        ['procedimiento_id'],
    )

    print("[MIGRATION] Esquema inicial de la clínica creado.")


def downgrade() -> None:
    op.drop_index('ix_foto_procedimiento_procedimiento_id', table_name='foto_procedimiento')
    op.drop_table('foto_procedimiento')
    op.drop_index('ix_procedimiento_fecha_qx', table_name='procedimiento')
    op.drop_table('procedimiento')
    op.drop_table('paciente')
    op.drop_table('medico')
    op.drop_table('usuario')
