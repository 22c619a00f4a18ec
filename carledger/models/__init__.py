# Automatically load all models so metadata knows them
from carledger.models.user_model import User
from carledger.models.car_model import Car
from carledger.models.car_share_model import CarShare
from carledger.models.expense_model import Expense
from carledger.models.system_settings_model import SystemSetting
