from sqlalchemy import Column, Enum, ForeignKey, Index, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class ShopSettings(Base):
    __tablename__ = 'shop_settings'

    shop_name = Column(Text, nullable=False, server_default=text("'Barbershop'"))
    open_hours = Column(Text, nullable=False, server_default=text("'{}'"))
    id = Column(Integer, primary_key=True)
    address = Column(Text)
    phone = Column(Text)
    email_from = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))


class DayOverrides(Base):
    __tablename__ = 'day_overrides'

    day = Column(Text, nullable=False, unique=True)
    state = Column(Enum('OPEN', 'CLOSED', name='day_override_state'), nullable=False)
    id = Column(Integer, primary_key=True)
    reason = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))


class SlotBlocks(Base):
    __tablename__ = 'slot_blocks'
    __table_args__ = (
        UniqueConstraint('day', 'start_time', 'end_time'),
    )

    day = Column(Text, nullable=False, index=True)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))


class Customers(Base):
    __tablename__ = 'customers'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    email = Column(Text)
    phone = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    appointments = relationship('Appointments', back_populates='customer')


class Appointments(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        # Two confirmed regular appointments can never share a slot
        Index(
            'uq_appointments_confirmed_slot',
            'start_time',
            'end_time',
            unique=True,
            sqlite_where=text("status = 'CONFIRMED' AND is_bonus = 0"),
            postgresql_where=text("status = 'CONFIRMED' AND is_bonus = 0"),
        ),
    )

    start_time = Column(Text, nullable=False, index=True)
    end_time = Column(Text, nullable=False)
    status = Column(Enum('CONFIRMED', 'CANCELED', name='appointment_status'), nullable=False, server_default=text("'CONFIRMED'"))
    is_bonus = Column(Integer, nullable=False, server_default=text('0'))
    created_by = Column(Enum('owner', 'customer', name='appointment_creator'), nullable=False)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    id = Column(Integer, primary_key=True)
    customer_id = Column(ForeignKey('customers.id', ondelete='SET NULL'))
    client_name = Column(Text)
    client_email = Column(Text)
    client_phone = Column(Text)
    notes = Column(Text)

    customer = relationship('Customers', back_populates='appointments')
