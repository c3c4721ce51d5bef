"""
Console Interface Module

State-driven text menu over the LedgerController. The view holds a reference
to the controller; the controller knows nothing about the view.
"""

import getpass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Optional, Tuple

from .config import get_config
from .currency import Money, decimal_from_string, validate_decimal_precision
from .errors import AccountError
from .ledger import LedgerController
from .logging_config import setup_logging


class State(Enum):
    """Console screens"""
    CREATE_OR_LOGIN = "create_or_login"
    MENU = "menu"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    BALANCE = "balance"
    HISTORY = "history"
    LOGOUT = "logout"
    EXIT = "exit"


MENU_TEXT = (
    "Select a number below:\n"
    "1 - Deposit\n"
    "2 - Withdraw\n"
    "3 - Check balance\n"
    "4 - See transaction history\n"
    "5 - Logout"
)

MENU_STATES = {
    "1": State.DEPOSIT,
    "2": State.WITHDRAWAL,
    "3": State.BALANCE,
    "4": State.HISTORY,
    "5": State.LOGOUT,
}


class ConsoleView:
    """Interactive session for one user at a time"""
    
    def __init__(
        self,
        controller: LedgerController,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        password_func: Callable[[str], str] = getpass.getpass
    ):
        self.controller = controller
        self._input = input_func
        self._output = output_func
        self._password = password_func
        self.state = State.CREATE_OR_LOGIN
        self.username: Optional[str] = None
        self._handlers = {
            State.CREATE_OR_LOGIN: self.create_or_login,
            State.MENU: self.menu,
            State.DEPOSIT: self.deposit,
            State.WITHDRAWAL: self.withdrawal,
            State.BALANCE: self.balance,
            State.HISTORY: self.history,
            State.LOGOUT: self.logout,
        }
    
    def run(self) -> None:
        """Drive the state machine until the user exits or input ends"""
        self._write("Welcome to the bank!")
        while self.state != State.EXIT:
            try:
                self._handlers[self.state]()
            except EOFError:
                self.state = State.EXIT
        self._write("Goodbye.")
    
    # Input helpers
    
    def _write(self, text: str) -> None:
        self._output(text)
    
    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()
    
    def _choose(self, prompt: str, retry_prompt: str, options: str) -> str:
        answer = self._ask(prompt).lower()[:1]
        while not answer or answer not in options:
            self._write("Invalid response.")
            answer = self._ask(retry_prompt).lower()[:1]
        return answer
    
    def _ask_credentials(self) -> Tuple[str, str]:
        while True:
            username = self._ask("Username: ")
            password = self._password("Password: ").strip()
            if username and password:
                return username, password
            self._write("Username and password cannot be empty.")
    
    def _ask_amount(self, prompt: str) -> Decimal:
        currency = self.controller.currency
        while True:
            try:
                value = decimal_from_string(self._ask(prompt))
            except ValueError:
                self._write("Invalid amount. Try again.")
                continue
            try:
                return validate_decimal_precision(value, currency)
            except InvalidOperation:
                self._write("Amount is too large. Try again.")
    
    def _money(self, amount: Decimal) -> str:
        return Money(amount, self.controller.currency).to_display()
    
    # Screens
    
    def create_or_login(self) -> None:
        choice = self._choose(
            "(C)reate a new account or (l)ogin: ",
            "Enter 'c' to create a new account or 'l' to login to an existing account: ",
            "cl"
        )
        self._write("Please enter the following information.")
        username, password = self._ask_credentials()
        
        if choice == "c":
            while not self.controller.create_account(username, password).ok:
                self._write("An account with that username already exists. Try a different username.")
                username, password = self._ask_credentials()
            self._write("Account creation successful!")
        else:
            while True:
                result = self.controller.login(username, password)
                if not result.ok:
                    self._write(result.message)
                    if result.error == AccountError.UNKNOWN_USERNAME:
                        self._write("Create an account to get started.")
                    return
                if result.value:
                    break
                self._write("That password does not match the account. Try again.")
                username, password = self._ask_credentials()
            self._write("Login successful!")
        
        self.username = username
        self.state = State.MENU
    
    def menu(self) -> None:
        self._write(MENU_TEXT)
        choice = self._choose(
            "> ",
            "Enter the number associated with your menu selection: ",
            "".join(MENU_STATES)
        )
        self.state = MENU_STATES[choice]
    
    def deposit(self) -> None:
        amount = self._ask_amount(f"Enter the deposit amount: {self.controller.currency.symbol}")
        result = self.controller.deposit(self.username, amount)
        if result.ok:
            self._write(
                f"You deposited {self._money(amount)}. "
                f"Your account balance is now {result.value.to_display()}"
            )
        else:
            self._write(result.message)
        self.state = State.MENU
    
    def withdrawal(self) -> None:
        amount = self._ask_amount(f"Enter the withdrawal amount: {self.controller.currency.symbol}")
        result = self.controller.withdraw(self.username, amount)
        if result.ok:
            self._write(
                f"You withdrew {self._money(amount)}. "
                f"Your account balance is now {result.value.to_display()}"
            )
        else:
            self._write(result.message)
        self.state = State.MENU
    
    def balance(self) -> None:
        result = self.controller.balance_of(self.username)
        if result.ok:
            self._write(f"Your account balance is {result.value.to_display()}")
        else:
            self._write(result.message)
        self.state = State.MENU
    
    def history(self) -> None:
        result = self.controller.history_of(self.username)
        if not result.ok:
            self._write(result.message)
        else:
            self._write(f"-----Transaction history for {self.username}-----")
            for line in result.value:
                self._write(line)
            if not result.value:
                self._write("No transactions yet.")
        self.state = State.MENU
    
    def logout(self) -> None:
        self._write("You have successfully logged out.")
        self.username = None
        choice = self._choose(
            "Do you wish to exit the program (y/n)? ",
            "Type 'y' if you want to exit the program and 'n' if you want to go back to login: ",
            "yn"
        )
        self.state = State.EXIT if choice == "y" else State.CREATE_OR_LOGIN


def main() -> int:
    """Console entry point"""
    config = get_config()
    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file
    )
    controller = LedgerController(config=config)
    ConsoleView(controller).run()
    return 0
